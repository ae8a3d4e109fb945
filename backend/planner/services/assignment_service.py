"""Assignment service: owner-scoped assignment CRUD and status tracking."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from planner.config import settings
from planner.database import utcnow
from planner.models.assignment import Assignment
from planner.models.enums import AssignmentStatus, Priority
from planner.repositories import assignment_repository, course_repository
from planner.services.access import owns
from planner.services.errors import DomainError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "description", "due_date", "status", "priority", "course_id")
REQUIRED_FIELDS = {"name", "due_date", "status", "priority", "course_id"}


def _require_own_course(db: Session, course_id: int, user_id: str, message: str) -> None:
    course = course_repository.get_by_id(db, course_id)
    if not owns(course, user_id):
        raise DomainError(message)


def _stamp_completion(assignment: Assignment, now: datetime) -> None:
    """Record the first completion time. Later completions and regressions keep it."""
    if assignment.status == AssignmentStatus.COMPLETED.value and assignment.completed_at is None:
        assignment.completed_at = now


def get_user_assignments(db: Session, user_id: str) -> list[Assignment]:
    return assignment_repository.get_assignments_by_user_id(db, user_id)


def get_course_assignments(db: Session, course_id: int, user_id: str) -> list[Assignment]:
    """Assignments of an owned course; an empty list when the course is not the caller's."""
    course = course_repository.get_by_id(db, course_id)
    if not owns(course, user_id):
        return []
    return assignment_repository.get_assignments_by_course_id(db, course_id)


def get_upcoming_assignments(
    db: Session,
    user_id: str,
    days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> list[Assignment]:
    days = settings.UPCOMING_WINDOW_DAYS if days is None else days
    return assignment_repository.get_upcoming_assignments(db, user_id, days, now or utcnow())


def get_overdue_assignments(db: Session, user_id: str, now: Optional[datetime] = None) -> list[Assignment]:
    return assignment_repository.get_overdue_assignments(db, user_id, now or utcnow())


def get_assignment(db: Session, assignment_id: int, user_id: str) -> Optional[Assignment]:
    assignment = assignment_repository.get_assignment_with_course(db, assignment_id)
    return assignment if owns(assignment, user_id) else None


def create_assignment(
    db: Session,
    user_id: str,
    *,
    course_id: int,
    name: str,
    due_date: datetime,
    description: Optional[str] = None,
    status: str = AssignmentStatus.NOT_STARTED.value,
    priority: str = Priority.MEDIUM.value,
) -> Assignment:
    """Create an assignment under one of the caller's courses."""
    _require_own_course(
        db, course_id, user_id,
        "Course not found or you don't have permission to add assignments to it.",
    )

    now = utcnow()
    assignment = Assignment(
        name=name,
        description=description,
        due_date=due_date,
        status=AssignmentStatus(status).value,
        priority=Priority(priority).value,
        course_id=course_id,
        user_id=user_id,
        created_at=now,
    )
    _stamp_completion(assignment, now)

    assignment_repository.add(db, assignment)
    db.commit()
    db.refresh(assignment)
    logger.info("Assignment %s created in course %s for user %s", assignment.id, course_id, user_id)
    return assignment


def update_assignment(db: Session, assignment_id: int, user_id: str, changes: dict) -> bool:
    """Apply the supplied fields to an owned assignment.

    Moving the assignment to another course requires owning that course too.
    """
    assignment = assignment_repository.get_by_id(db, assignment_id)
    if not owns(assignment, user_id):
        return False

    new_course_id = changes.get("course_id")
    if new_course_id is not None and new_course_id != assignment.course_id:
        _require_own_course(
            db, new_course_id, user_id,
            "Course not found or you don't have permission to use it.",
        )

    for field in UPDATABLE_FIELDS:
        if field not in changes:
            continue
        value = changes[field]
        if value is None and field in REQUIRED_FIELDS:
            continue
        if field == "status":
            value = AssignmentStatus(value).value
        elif field == "priority":
            value = Priority(value).value
        setattr(assignment, field, value)

    now = utcnow()
    assignment.updated_at = now
    _stamp_completion(assignment, now)

    db.commit()
    return True


def update_assignment_status(db: Session, assignment_id: int, status: str, user_id: str) -> bool:
    assignment = assignment_repository.get_by_id(db, assignment_id)
    if not owns(assignment, user_id):
        return False

    now = utcnow()
    assignment.status = AssignmentStatus(status).value
    assignment.updated_at = now
    _stamp_completion(assignment, now)

    db.commit()
    return True


def delete_assignment(db: Session, assignment_id: int, user_id: str) -> bool:
    assignment = assignment_repository.get_by_id(db, assignment_id)
    if not owns(assignment, user_id):
        return False

    assignment_repository.delete(db, assignment)
    db.commit()
    return True


def user_owns_assignment(db: Session, assignment_id: int, user_id: str) -> bool:
    return owns(assignment_repository.get_by_id(db, assignment_id), user_id)
