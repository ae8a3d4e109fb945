"""Course queries."""

from typing import Optional

from sqlalchemy.orm import Session, selectinload

from planner.models.course import Course


def get_by_id(db: Session, course_id: int) -> Optional[Course]:
    return db.query(Course).filter(Course.id == course_id).first()


def get_courses_by_user_id(db: Session, user_id: str) -> list[Course]:
    return (
        db.query(Course)
        .filter(Course.user_id == user_id)
        .order_by(Course.name)
        .all()
    )


def get_course_with_assignments(db: Session, course_id: int) -> Optional[Course]:
    return (
        db.query(Course)
        .options(selectinload(Course.assignments))
        .filter(Course.id == course_id)
        .first()
    )


def course_code_exists_for_user(
    db: Session,
    user_id: str,
    course_code: str,
    exclude_course_id: Optional[int] = None,
) -> bool:
    query = db.query(Course.id).filter(Course.user_id == user_id, Course.course_code == course_code)
    if exclude_course_id is not None:
        query = query.filter(Course.id != exclude_course_id)
    return db.query(query.exists()).scalar()


def add(db: Session, course: Course) -> Course:
    db.add(course)
    db.flush()
    return course


def delete(db: Session, course: Course) -> None:
    db.delete(course)
    db.flush()
