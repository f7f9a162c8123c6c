"""Pydantic schemas for task request/response validation."""

from pydantic import StringConstraints, field_validator
from datetime import datetime
from typing import Annotated, Optional, Literal

from tasknest.core.database import utcnow
from tasknest.schemas.base import CamelModel, to_naive_utc

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, max_length=1000)]
Category = Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)]
Priority = Literal["Low", "Medium", "High"]
Status = Literal["Pending", "In Progress", "Completed"]


class TaskCreate(CamelModel):
    """Schema for creating a task (personal or team task)."""

    title: Title
    description: Optional[Description] = ""
    category: Optional[Category] = "General"
    priority: Priority = "Medium"
    status: Status = "Pending"
    due_date: Optional[datetime] = None
    team_id: Optional[int] = None
    assigned_to: Optional[int] = None

    @field_validator("due_date")
    @classmethod
    def due_date_not_in_past(cls, v):
        v = to_naive_utc(v)
        if v is not None and v < utcnow():
            raise ValueError("Due date cannot be in the past")
        return v


class TaskUpdate(CamelModel):
    """Schema for updating an existing task. team_id ne se modifie pas."""

    title: Optional[Title] = None
    description: Optional[Description] = None
    category: Optional[Category] = None
    priority: Optional[Priority] = None
    status: Optional[Status] = None
    due_date: Optional[datetime] = None
    assigned_to: Optional[int] = None

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v):
        return to_naive_utc(v)


class TaskResponse(CamelModel):
    """Schema for task responses from API."""

    id: int
    user_id: int
    team_id: Optional[int]
    assigned_to: Optional[int]
    title: str
    description: Optional[str]
    category: Optional[str]
    priority: str
    status: str
    due_date: Optional[datetime]
    completed_at: Optional[datetime]
    is_overdue: bool
    created_at: datetime
    updated_at: datetime
