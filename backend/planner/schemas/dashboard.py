"""Dashboard schemas."""

from typing import Optional

from pydantic import BaseModel


class DashboardResponse(BaseModel):
    total_courses: int
    total_assignments: int
    completed_assignments: int
    upcoming_assignments: int
    overdue_assignments: int
    total_group_projects: int
    completion_percentage: float
    upcoming_window_days: int


class WeatherResponse(BaseModel):
    city: str
    temperature_c: float
    description: str
    icon: Optional[str] = None


class ReminderResponse(BaseModel):
    sent: bool
    message: str
