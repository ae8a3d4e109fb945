"""Dashboard service: read-only aggregates over the caller's data."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from planner.config import settings
from planner.database import utcnow
from planner.models.enums import AssignmentStatus
from planner.repositories import assignment_repository, course_repository, group_project_repository


@dataclass
class DashboardData:
    total_courses: int
    total_assignments: int
    completed_assignments: int
    upcoming_assignments: int
    overdue_assignments: int
    total_group_projects: int
    completion_percentage: float


def completion_percentage(completed: int, total: int) -> float:
    """Share of completed items, rounded to one decimal. Zero items gives 0.0."""
    if total <= 0:
        return 0.0
    return round(completed / total * 100, 1)


def get_dashboard_data(
    db: Session,
    user_id: str,
    days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> DashboardData:
    days = settings.UPCOMING_WINDOW_DAYS if days is None else days
    now = now or utcnow()

    courses = course_repository.get_courses_by_user_id(db, user_id)
    assignments = assignment_repository.get_assignments_by_user_id(db, user_id)
    projects = group_project_repository.get_projects_by_user_id(db, user_id)

    upcoming = assignment_repository.get_upcoming_assignments(db, user_id, days, now)
    overdue = assignment_repository.get_overdue_assignments(db, user_id, now)

    total = len(assignments)
    completed = sum(1 for a in assignments if a.status == AssignmentStatus.COMPLETED.value)

    return DashboardData(
        total_courses=len(courses),
        total_assignments=total,
        completed_assignments=completed,
        upcoming_assignments=len(upcoming),
        overdue_assignments=len(overdue),
        total_group_projects=len(projects),
        completion_percentage=completion_percentage(completed, total),
    )
