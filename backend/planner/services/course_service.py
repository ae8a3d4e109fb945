"""Course service: owner-scoped course CRUD."""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from planner.database import utcnow
from planner.models.course import Course, DEFAULT_COLOR
from planner.repositories import course_repository
from planner.services.access import owns
from planner.services.errors import ConflictError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "course_code", "semester", "description", "color")
REQUIRED_FIELDS = {"name", "course_code", "semester"}


def _duplicate_code(course_code: str) -> ConflictError:
    return ConflictError(f"A course with code '{course_code}' already exists.")


def get_user_courses(db: Session, user_id: str) -> list[Course]:
    return course_repository.get_courses_by_user_id(db, user_id)


def get_course(db: Session, course_id: int, user_id: str) -> Optional[Course]:
    course = course_repository.get_by_id(db, course_id)
    return course if owns(course, user_id) else None


def get_course_with_assignments(db: Session, course_id: int, user_id: str) -> Optional[Course]:
    course = course_repository.get_course_with_assignments(db, course_id)
    return course if owns(course, user_id) else None


def create_course(
    db: Session,
    user_id: str,
    *,
    name: str,
    course_code: str,
    semester: str,
    description: Optional[str] = None,
    color: Optional[str] = None,
) -> Course:
    """Create a course for the caller. Course codes are unique per owner."""
    if course_repository.course_code_exists_for_user(db, user_id, course_code):
        raise _duplicate_code(course_code)

    course = Course(
        name=name,
        course_code=course_code,
        semester=semester,
        description=description,
        color=color or DEFAULT_COLOR,
        user_id=user_id,
        created_at=utcnow(),
    )
    try:
        course_repository.add(db, course)
        db.commit()
    except IntegrityError:
        # Unique index caught a concurrent insert of the same code
        db.rollback()
        raise _duplicate_code(course_code)

    db.refresh(course)
    logger.info("Course %s (%s) created for user %s", course.id, course.course_code, user_id)
    return course


def update_course(db: Session, course_id: int, user_id: str, changes: dict) -> bool:
    """Apply the supplied fields to an owned course. Returns False when not found/not owned."""
    course = course_repository.get_by_id(db, course_id)
    if not owns(course, user_id):
        return False

    new_code = changes.get("course_code")
    if new_code is not None and course_repository.course_code_exists_for_user(
        db, user_id, new_code, exclude_course_id=course_id
    ):
        raise _duplicate_code(new_code)

    for field in UPDATABLE_FIELDS:
        if field not in changes:
            continue
        if changes[field] is None and field in REQUIRED_FIELDS:
            continue
        setattr(course, field, changes[field])
    if not course.color:
        course.color = DEFAULT_COLOR
    course.updated_at = utcnow()

    code = course.course_code
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise _duplicate_code(code)
    return True


def delete_course(db: Session, course_id: int, user_id: str) -> bool:
    """Delete an owned course together with its assignments."""
    course = course_repository.get_by_id(db, course_id)
    if not owns(course, user_id):
        return False

    course_repository.delete(db, course)
    db.commit()
    logger.info("Course %s deleted by user %s", course_id, user_id)
    return True


def user_owns_course(db: Session, course_id: int, user_id: str) -> bool:
    return owns(course_repository.get_by_id(db, course_id), user_id)
