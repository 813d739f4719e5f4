# todoapp/schemas/tokens.py
from pydantic import BaseModel
from todoapp.schemas.user import UserOut


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AuthResult(TokenPair):
    user: UserOut

    model_config = {
        "from_attributes": True
    }


class RefreshRequest(BaseModel):
    refresh_token: str
