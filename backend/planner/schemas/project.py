"""Group project, member and task schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from planner.models.enums import TaskStatus, ROLE_MEMBER
from planner.schemas.common import to_naive_utc


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    due_date: Optional[datetime] = None

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v):
        return to_naive_utc(v)


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    due_date: Optional[datetime] = None

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v):
        return to_naive_utc(v)


class MemberAdd(BaseModel):
    email: str
    role: str = Field(default=ROLE_MEMBER, max_length=50)


class MemberResponse(BaseModel):
    id: int
    user_id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: str
    joined_at: str


class TaskCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    due_date: Optional[datetime] = None
    assigned_user_id: Optional[str] = None

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v):
        return to_naive_utc(v)


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class TaskResponse(BaseModel):
    id: int
    project_id: int
    name: str
    description: Optional[str]
    status: TaskStatus
    due_date: Optional[str] = None
    assigned_user_id: Optional[str] = None
    assigned_user_name: Optional[str] = None
    is_overdue: bool
    created_at: str
    updated_at: Optional[str] = None
    completed_at: Optional[str] = None


class ProjectResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    due_date: Optional[str] = None
    member_count: int
    total_tasks: int
    completed_tasks: int
    completion_percentage: float
    created_at: str
    updated_at: Optional[str] = None


class ProjectDetailResponse(ProjectResponse):
    members: list[MemberResponse]
    tasks: list[TaskResponse]


class ProjectListResponse(BaseModel):
    projects: list[ProjectResponse]
    total: int
