from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime


def _clean_name(v: str) -> str:
    v = v.strip()
    if len(v) < 2:
        raise ValueError("Name must be at least 2 characters")
    return v


class UserRegister(BaseModel):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return _clean_name(v)


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserSummary(BaseModel):
    id: int
    name: str
    email: str

    model_config = {
        "from_attributes": True
    }


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: str
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    email: Optional[EmailStr] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        if v is None:
            return v
        return _clean_name(v)


class RoleUpdate(BaseModel):
    # Checked against the known roles by the access policy
    role: str
