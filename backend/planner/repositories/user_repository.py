"""User queries."""

from typing import Optional

from sqlalchemy.orm import Session

from planner.models.user import User


def get_by_id(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_by_email(db: Session, email: str) -> Optional[User]:
    """Case-insensitive lookup; emails are stored lower-cased."""
    return db.query(User).filter(User.email == email.strip().lower()).first()


def add(db: Session, user: User) -> User:
    db.add(user)
    db.flush()
    return user


def delete(db: Session, user: User) -> None:
    db.delete(user)
    db.flush()
