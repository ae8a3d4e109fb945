"""Course request/response schemas."""

from typing import Optional

from pydantic import BaseModel, Field

from planner.schemas.assignment import AssignmentResponse

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class CourseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    course_code: str = Field(min_length=1, max_length=50)
    semester: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)


class CourseUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    course_code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    semester: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)


class CourseResponse(BaseModel):
    id: int
    name: str
    course_code: str
    semester: str
    description: Optional[str]
    color: str
    created_at: str
    updated_at: Optional[str] = None

    class Config:
        from_attributes = True


class CourseDetailResponse(CourseResponse):
    assignments: list[AssignmentResponse] = []


class CourseListResponse(BaseModel):
    courses: list[CourseResponse]
    total: int
