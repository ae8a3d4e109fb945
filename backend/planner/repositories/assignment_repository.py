"""Assignment queries.

Every list is ordered by due date and eager-loads the course, since callers
almost always render the course name next to the assignment.
"""

from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from planner.models.assignment import Assignment
from planner.models.enums import AssignmentStatus


def _base_query(db: Session):
    return db.query(Assignment).options(joinedload(Assignment.course))


def get_by_id(db: Session, assignment_id: int) -> Optional[Assignment]:
    return db.query(Assignment).filter(Assignment.id == assignment_id).first()


def get_assignment_with_course(db: Session, assignment_id: int) -> Optional[Assignment]:
    return _base_query(db).filter(Assignment.id == assignment_id).first()


def get_assignments_by_user_id(db: Session, user_id: str) -> list[Assignment]:
    return (
        _base_query(db)
        .filter(Assignment.user_id == user_id)
        .order_by(Assignment.due_date)
        .all()
    )


def get_assignments_by_course_id(db: Session, course_id: int) -> list[Assignment]:
    return (
        _base_query(db)
        .filter(Assignment.course_id == course_id)
        .order_by(Assignment.due_date)
        .all()
    )


def get_upcoming_assignments(db: Session, user_id: str, days: int, now: datetime) -> list[Assignment]:
    """Open assignments due within [now, now + days]."""
    until = now + timedelta(days=days)
    return (
        _base_query(db)
        .filter(
            Assignment.user_id == user_id,
            Assignment.status != AssignmentStatus.COMPLETED.value,
            Assignment.due_date >= now,
            Assignment.due_date <= until,
        )
        .order_by(Assignment.due_date)
        .all()
    )


def get_overdue_assignments(db: Session, user_id: str, now: datetime) -> list[Assignment]:
    """Open assignments whose due date is strictly before now."""
    return (
        _base_query(db)
        .filter(
            Assignment.user_id == user_id,
            Assignment.status != AssignmentStatus.COMPLETED.value,
            Assignment.due_date < now,
        )
        .order_by(Assignment.due_date)
        .all()
    )


def add(db: Session, assignment: Assignment) -> Assignment:
    db.add(assignment)
    db.flush()
    return assignment


def delete(db: Session, assignment: Assignment) -> None:
    db.delete(assignment)
    db.flush()
