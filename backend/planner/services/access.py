"""Authorization predicates, one per entity family.

Courses and assignments are owned by a single user; group projects are shared
by their members.
"""

from typing import Any, Optional

from sqlalchemy.orm import Session

from planner.repositories import group_project_repository


def owns(entity: Optional[Any], user_id: str) -> bool:
    """True when the entity exists and its stored owner is the caller."""
    return entity is not None and entity.user_id == user_id


def is_member(db: Session, project_id: int, user_id: str) -> bool:
    return group_project_repository.is_user_member(db, project_id, user_id)
