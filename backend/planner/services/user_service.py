"""User service: registration, password changes and account deletion."""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from planner.models.user import User
from planner.repositories import user_repository
from planner.services.errors import ConflictError

logger = logging.getLogger(__name__)


def register_user(
    db: Session,
    *,
    email: str,
    password_hash: str,
    first_name: str,
    last_name: str,
) -> User:
    email = email.strip().lower()
    if user_repository.get_by_email(db, email) is not None:
        raise ConflictError("Email already registered")

    user = User(
        email=email,
        password_hash=password_hash,
        first_name=first_name.strip(),
        last_name=last_name.strip(),
    )
    try:
        user_repository.add(db, user)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email already registered")

    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


def get_user(db: Session, user_id: str) -> Optional[User]:
    return user_repository.get_by_id(db, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return user_repository.get_by_email(db, email)


def set_password_hash(db: Session, user: User, password_hash: str) -> None:
    user.password_hash = password_hash
    db.commit()


def delete_user(db: Session, user_id: str) -> bool:
    """Delete an account.

    Courses (and with them their assignments) and project memberships go with
    the user; tasks assigned to the user stay in their projects, unassigned.
    """
    user = user_repository.get_by_id(db, user_id)
    if user is None:
        return False

    user_repository.delete(db, user)
    db.commit()
    logger.info("Deleted user %s", user_id)
    return True
