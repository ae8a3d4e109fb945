"""Projects router: group projects, their members and tasks.

Non-members get 404 for every project route, exactly as if the project did
not exist.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from planner.database import get_db
from planner.models.group_project import GroupProject, ProjectMember, ProjectTask
from planner.models.user import User
from planner.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectDetailResponse,
    ProjectListResponse,
    MemberAdd,
    MemberResponse,
    TaskCreate,
    TaskStatusUpdate,
    TaskResponse,
)
from planner.schemas.common import isoformat
from planner.middleware.auth import get_current_user
from planner.services import group_project_service
from planner.services.errors import ConflictError, DomainError

router = APIRouter(prefix="/api/projects", tags=["projects"])

PROJECT_NOT_FOUND = "Project not found"


def _project_to_response(project: GroupProject) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        name=project.name,
        description=project.description,
        due_date=isoformat(project.due_date),
        member_count=len(project.members),
        total_tasks=project.total_tasks,
        completed_tasks=project.completed_tasks,
        completion_percentage=round(project.completion_percentage, 1),
        created_at=project.created_at.isoformat(),
        updated_at=isoformat(project.updated_at),
    )


def _member_to_response(member: ProjectMember) -> MemberResponse:
    return MemberResponse(
        id=member.id,
        user_id=member.user_id,
        email=member.user.email if member.user else None,
        full_name=member.user.full_name if member.user else None,
        role=member.role,
        joined_at=member.joined_at.isoformat(),
    )


def _task_to_response(task: ProjectTask) -> TaskResponse:
    return TaskResponse(
        id=task.id,
        project_id=task.group_project_id,
        name=task.name,
        description=task.description,
        status=task.status,
        due_date=isoformat(task.due_date),
        assigned_user_id=task.assigned_user_id,
        assigned_user_name=task.assigned_user.full_name if task.assigned_user else None,
        is_overdue=task.is_overdue,
        created_at=task.created_at.isoformat(),
        updated_at=isoformat(task.updated_at),
        completed_at=isoformat(task.completed_at),
    )


def _detail_response(project: GroupProject) -> ProjectDetailResponse:
    base = _project_to_response(project)
    return ProjectDetailResponse(
        **base.model_dump(),
        members=[_member_to_response(m) for m in project.members],
        tasks=[_task_to_response(t) for t in project.tasks],
    )


def _load_detail(db: Session, project_id: int, user_id: str) -> ProjectDetailResponse:
    project = group_project_service.get_project_with_details(db, project_id, user_id)
    if not project:
        raise HTTPException(status_code=404, detail=PROJECT_NOT_FOUND)
    return _detail_response(project)


@router.get("", response_model=ProjectListResponse)
def list_projects(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List projects the current user is a member of."""
    projects = group_project_service.get_user_projects(db, current_user.id)
    return ProjectListResponse(projects=[_project_to_response(p) for p in projects], total=len(projects))


@router.post("", response_model=ProjectDetailResponse, status_code=201)
def create_project(
    req: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a project; the creator becomes its Owner."""
    project = group_project_service.create_project(
        db,
        current_user.id,
        name=req.name,
        description=req.description,
        due_date=req.due_date,
    )
    return _load_detail(db, project.id, current_user.id)


@router.get("/{project_id}", response_model=ProjectDetailResponse)
def get_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _load_detail(db, project_id, current_user.id)


@router.put("/{project_id}", response_model=ProjectDetailResponse)
def update_project(
    project_id: int,
    req: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not group_project_service.update_project(db, project_id, current_user.id, req.model_dump(exclude_unset=True)):
        raise HTTPException(status_code=404, detail=PROJECT_NOT_FOUND)
    return _load_detail(db, project_id, current_user.id)


@router.delete("/{project_id}", status_code=204)
def delete_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not group_project_service.delete_project(db, project_id, current_user.id):
        raise HTTPException(status_code=404, detail=PROJECT_NOT_FOUND)


# ── Members ──────────────────────────────────────────────────────────────────

@router.post("/{project_id}/members", response_model=ProjectDetailResponse, status_code=201)
def add_member(
    project_id: int,
    req: MemberAdd,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Add a registered user to the project by email."""
    try:
        added = group_project_service.add_member(db, project_id, current_user.id, req.email, req.role)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not added:
        raise HTTPException(status_code=404, detail=PROJECT_NOT_FOUND)
    return _load_detail(db, project_id, current_user.id)


@router.delete("/{project_id}/members/{member_user_id}", status_code=204)
def remove_member(
    project_id: int,
    member_user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        removed = group_project_service.remove_member(db, project_id, current_user.id, member_user_id)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not removed:
        raise HTTPException(status_code=404, detail="Member not found")


# ── Tasks ────────────────────────────────────────────────────────────────────

@router.post("/{project_id}/tasks", response_model=TaskResponse, status_code=201)
def add_task(
    project_id: int,
    req: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        task = group_project_service.add_task(
            db,
            project_id,
            current_user.id,
            name=req.name,
            description=req.description,
            due_date=req.due_date,
            assigned_user_id=req.assigned_user_id,
        )
    except DomainError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not task:
        raise HTTPException(status_code=404, detail=PROJECT_NOT_FOUND)
    return _task_to_response(task)


@router.patch("/{project_id}/tasks/{task_id}/status", status_code=204)
def update_task_status(
    project_id: int,
    task_id: int,
    req: TaskStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not group_project_service.update_task_status(db, project_id, task_id, req.status.value, current_user.id):
        raise HTTPException(status_code=404, detail="Task not found")


@router.delete("/{project_id}/tasks/{task_id}", status_code=204)
def delete_task(
    project_id: int,
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not group_project_service.delete_task(db, project_id, task_id, current_user.id):
        raise HTTPException(status_code=404, detail="Task not found")
