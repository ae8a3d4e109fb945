"""GroupProject, membership and task queries."""

from typing import Optional

from sqlalchemy import delete as sa_delete, func, or_, select, update as sa_update
from sqlalchemy.orm import Session, aliased, selectinload

from planner.models.enums import ROLE_OWNER
from planner.models.group_project import GroupProject, ProjectMember, ProjectTask


def get_by_id(db: Session, project_id: int) -> Optional[GroupProject]:
    return db.query(GroupProject).filter(GroupProject.id == project_id).first()


def get_projects_by_user_id(db: Session, user_id: str) -> list[GroupProject]:
    member_of = select(ProjectMember.group_project_id).where(ProjectMember.user_id == user_id)
    return (
        db.query(GroupProject)
        .options(selectinload(GroupProject.members), selectinload(GroupProject.tasks))
        .filter(GroupProject.id.in_(member_of))
        .order_by(GroupProject.created_at.desc(), GroupProject.id.desc())
        .all()
    )


def get_project_with_members_and_tasks(db: Session, project_id: int) -> Optional[GroupProject]:
    return (
        db.query(GroupProject)
        .options(
            selectinload(GroupProject.members).joinedload(ProjectMember.user),
            selectinload(GroupProject.tasks).joinedload(ProjectTask.assigned_user),
        )
        .filter(GroupProject.id == project_id)
        .first()
    )


def is_user_member(db: Session, project_id: int, user_id: str) -> bool:
    query = db.query(ProjectMember.id).filter(
        ProjectMember.group_project_id == project_id,
        ProjectMember.user_id == user_id,
    )
    return db.query(query.exists()).scalar()


def get_member(db: Session, project_id: int, user_id: str) -> Optional[ProjectMember]:
    return (
        db.query(ProjectMember)
        .filter(ProjectMember.group_project_id == project_id, ProjectMember.user_id == user_id)
        .first()
    )


def count_owners(db: Session, project_id: int) -> int:
    return (
        db.query(func.count(ProjectMember.id))
        .filter(ProjectMember.group_project_id == project_id, ProjectMember.role == ROLE_OWNER)
        .scalar()
    )


def add(db: Session, project: GroupProject) -> GroupProject:
    db.add(project)
    db.flush()
    return project


def delete(db: Session, project: GroupProject) -> None:
    db.delete(project)
    db.flush()


def add_member(db: Session, member: ProjectMember) -> ProjectMember:
    db.add(member)
    db.flush()
    return member


def owner_rows_query(db: Session, project_id: int):
    return (
        db.query(ProjectMember.id)
        .filter(ProjectMember.group_project_id == project_id, ProjectMember.role == ROLE_OWNER)
        .with_for_update()
    )


def delete_member_unless_last_owner(db: Session, member: ProjectMember) -> int:
    """Delete a membership row unless it is the project's only Owner.

    The project's Owner rows are locked first (SELECT ... FOR UPDATE; SQLite
    has no row locks but serializes writers), then the owner count is
    evaluated inside the DELETE itself. A concurrent removal therefore waits
    for this transaction and sees the updated count. Returns the number of
    rows deleted (0 means the guard refused).
    """
    owner_rows_query(db, member.group_project_id).all()

    # Aliased so the count is not correlated to the row being deleted
    owners = aliased(ProjectMember)
    owner_count = (
        select(func.count(owners.id))
        .where(
            owners.group_project_id == member.group_project_id,
            owners.role == ROLE_OWNER,
        )
        .scalar_subquery()
    )
    stmt = (
        sa_delete(ProjectMember)
        .where(
            ProjectMember.id == member.id,
            or_(ProjectMember.role != ROLE_OWNER, owner_count > 1),
        )
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    return result.rowcount


def get_task(db: Session, project_id: int, task_id: int) -> Optional[ProjectTask]:
    return (
        db.query(ProjectTask)
        .filter(ProjectTask.id == task_id, ProjectTask.group_project_id == project_id)
        .first()
    )


def add_task(db: Session, task: ProjectTask) -> ProjectTask:
    db.add(task)
    db.flush()
    return task


def delete_task(db: Session, task: ProjectTask) -> None:
    db.delete(task)
    db.flush()


def unassign_member_tasks(db: Session, project_id: int, user_id: str) -> int:
    """Clear the assignee on a project's tasks held by user_id."""
    result = db.execute(
        sa_update(ProjectTask)
        .where(ProjectTask.group_project_id == project_id, ProjectTask.assigned_user_id == user_id)
        .values(assigned_user_id=None)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount
