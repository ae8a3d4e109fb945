"""Group project service: membership-scoped projects, members and tasks.

Any member of a project may read, edit and delete it, manage its members and
manage its tasks. Every project keeps at least one member with the Owner role.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from planner.database import utcnow
from planner.models.enums import TaskStatus, ROLE_OWNER, ROLE_MEMBER
from planner.models.group_project import GroupProject, ProjectMember, ProjectTask
from planner.repositories import group_project_repository, user_repository
from planner.services.access import is_member
from planner.services.errors import ConflictError, DomainError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "description", "due_date")


def get_user_projects(db: Session, user_id: str) -> list[GroupProject]:
    return group_project_repository.get_projects_by_user_id(db, user_id)


def get_project(db: Session, project_id: int, user_id: str) -> Optional[GroupProject]:
    if not is_member(db, project_id, user_id):
        return None
    return group_project_repository.get_by_id(db, project_id)


def get_project_with_details(db: Session, project_id: int, user_id: str) -> Optional[GroupProject]:
    """Project with members (and their users) and tasks (and their assignees)."""
    if not is_member(db, project_id, user_id):
        return None
    return group_project_repository.get_project_with_members_and_tasks(db, project_id)


def create_project(
    db: Session,
    user_id: str,
    *,
    name: str,
    description: Optional[str] = None,
    due_date: Optional[datetime] = None,
) -> GroupProject:
    """Create a project with the creator enrolled as its Owner in the same transaction."""
    now = utcnow()
    project = GroupProject(
        name=name,
        description=description,
        due_date=due_date,
        created_at=now,
    )
    group_project_repository.add(db, project)

    group_project_repository.add_member(db, ProjectMember(
        group_project_id=project.id,
        user_id=user_id,
        role=ROLE_OWNER,
        joined_at=now,
    ))
    db.commit()
    db.refresh(project)
    logger.info("Project %s created by user %s", project.id, user_id)
    return project


def update_project(db: Session, project_id: int, user_id: str, changes: dict) -> bool:
    if not is_member(db, project_id, user_id):
        return False

    project = group_project_repository.get_by_id(db, project_id)
    if project is None:
        return False

    for field in UPDATABLE_FIELDS:
        if field not in changes:
            continue
        if field == "name" and changes[field] is None:
            continue
        setattr(project, field, changes[field])
    project.updated_at = utcnow()

    db.commit()
    return True


def delete_project(db: Session, project_id: int, user_id: str) -> bool:
    """Delete the project along with its memberships and tasks."""
    if not is_member(db, project_id, user_id):
        return False

    project = group_project_repository.get_by_id(db, project_id)
    if project is None:
        return False

    group_project_repository.delete(db, project)
    db.commit()
    logger.info("Project %s deleted by user %s", project_id, user_id)
    return True


def add_member(
    db: Session,
    project_id: int,
    user_id: str,
    member_email: str,
    role: str = ROLE_MEMBER,
) -> bool:
    """Invite a registered user by email.

    Returns False when the caller is not a member. Raises ConflictError when no
    account has that email or the account is already a member.
    """
    if not is_member(db, project_id, user_id):
        return False

    member_user = user_repository.get_by_email(db, member_email)
    if member_user is None:
        raise ConflictError(f"No user found with email '{member_email}'.")

    if is_member(db, project_id, member_user.id):
        raise ConflictError("This user is already a member of the project.")

    role = (role or ROLE_MEMBER).strip() or ROLE_MEMBER
    try:
        group_project_repository.add_member(db, ProjectMember(
            group_project_id=project_id,
            user_id=member_user.id,
            role=role,
            joined_at=utcnow(),
        ))
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("This user is already a member of the project.")

    logger.info("User %s added to project %s as %s", member_user.id, project_id, role)
    return True


def remove_member(db: Session, project_id: int, user_id: str, member_user_id: str) -> bool:
    """Remove a member. Refuses to remove the last Owner."""
    if not is_member(db, project_id, user_id):
        return False

    member = group_project_repository.get_member(db, project_id, member_user_id)
    if member is None:
        return False

    deleted = group_project_repository.delete_member_unless_last_owner(db, member)
    if not deleted:
        db.rollback()
        raise ConflictError("Cannot remove the last owner of the project.")

    # Tasks may only be assigned to members
    group_project_repository.unassign_member_tasks(db, project_id, member_user_id)
    db.commit()
    logger.info("User %s removed from project %s by %s", member_user_id, project_id, user_id)
    return True


def user_is_member(db: Session, project_id: int, user_id: str) -> bool:
    return is_member(db, project_id, user_id)


def add_task(
    db: Session,
    project_id: int,
    user_id: str,
    *,
    name: str,
    description: Optional[str] = None,
    due_date: Optional[datetime] = None,
    assigned_user_id: Optional[str] = None,
) -> Optional[ProjectTask]:
    """Add a NotStarted task. Returns None when the caller is not a member."""
    if not is_member(db, project_id, user_id):
        return None

    if assigned_user_id and not is_member(db, project_id, assigned_user_id):
        raise DomainError("Tasks can only be assigned to project members.")

    task = ProjectTask(
        group_project_id=project_id,
        name=name,
        description=description,
        due_date=due_date,
        assigned_user_id=assigned_user_id or None,
        status=TaskStatus.NOT_STARTED.value,
        created_at=utcnow(),
    )
    group_project_repository.add_task(db, task)
    db.commit()
    db.refresh(task)
    return task


def update_task_status(db: Session, project_id: int, task_id: int, status: str, user_id: str) -> bool:
    """Set a task's status. Completed stamps completed_at; anything else clears it."""
    if not is_member(db, project_id, user_id):
        return False

    task = group_project_repository.get_task(db, project_id, task_id)
    if task is None:
        return False

    now = utcnow()
    task.status = TaskStatus(status).value
    task.updated_at = now
    task.completed_at = now if task.status == TaskStatus.COMPLETED.value else None

    db.commit()
    return True


def delete_task(db: Session, project_id: int, task_id: int, user_id: str) -> bool:
    if not is_member(db, project_id, user_id):
        return False

    task = group_project_repository.get_task(db, project_id, task_id)
    if task is None:
        return False

    group_project_repository.delete_task(db, task)
    db.commit()
    return True
