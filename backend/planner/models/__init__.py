"""SQLAlchemy ORM models."""

from planner.models.user import User
from planner.models.course import Course
from planner.models.assignment import Assignment
from planner.models.group_project import GroupProject, ProjectMember, ProjectTask

__all__ = [
    "User",
    "Course",
    "Assignment",
    "GroupProject",
    "ProjectMember",
    "ProjectTask",
]
