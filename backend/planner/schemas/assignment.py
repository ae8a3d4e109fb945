"""Assignment request/response schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from planner.models.enums import AssignmentStatus, Priority
from planner.schemas.common import to_naive_utc


class AssignmentCreate(BaseModel):
    course_id: int
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    due_date: datetime
    status: AssignmentStatus = AssignmentStatus.NOT_STARTED
    priority: Priority = Priority.MEDIUM

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v):
        return to_naive_utc(v)


class AssignmentUpdate(BaseModel):
    course_id: Optional[int] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    due_date: Optional[datetime] = None
    status: Optional[AssignmentStatus] = None
    priority: Optional[Priority] = None

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v):
        return to_naive_utc(v)


class AssignmentStatusUpdate(BaseModel):
    status: AssignmentStatus


class AssignmentResponse(BaseModel):
    id: int
    course_id: int
    course_name: Optional[str] = None
    course_code: Optional[str] = None
    name: str
    description: Optional[str]
    due_date: str
    status: AssignmentStatus
    priority: Priority
    is_overdue: bool
    days_until_due: int
    created_at: str
    updated_at: Optional[str] = None
    completed_at: Optional[str] = None

    class Config:
        from_attributes = True


class AssignmentListResponse(BaseModel):
    assignments: list[AssignmentResponse]
    total: int
