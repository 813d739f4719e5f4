# todoapp/schemas/task.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Dict, Optional

from todoapp.models.task import TaskStatus, TaskPriority
from todoapp.schemas.user import UserSummary


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_to: Optional[int] = None
    due_date: Optional[datetime] = None

    # Unknown keys (an "owner" in particular) are dropped
    model_config = {
        "extra": "ignore"
    }

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        return v


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assigned_to: Optional[int] = None
    due_date: Optional[datetime] = None

    model_config = {
        "extra": "ignore"
    }

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        return v


class TaskFilters(BaseModel):
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None


class TaskOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    owner_id: int
    assigned_to: Optional[int] = None
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    # Related objects
    owner: UserSummary
    assignee: Optional[UserSummary] = None

    model_config = {
        "from_attributes": True
    }


class TaskStats(BaseModel):
    by_status: Dict[str, int]
    by_priority: Dict[str, int]
