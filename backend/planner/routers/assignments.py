"""Assignments router: owner-scoped assignment management."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from planner.database import get_db
from planner.models.assignment import Assignment
from planner.models.user import User
from planner.schemas.assignment import (
    AssignmentCreate,
    AssignmentUpdate,
    AssignmentStatusUpdate,
    AssignmentResponse,
    AssignmentListResponse,
)
from planner.schemas.common import isoformat
from planner.middleware.auth import get_current_user
from planner.services import assignment_service
from planner.services.errors import DomainError

router = APIRouter(prefix="/api/assignments", tags=["assignments"])


def assignment_to_response(assignment: Assignment) -> AssignmentResponse:
    course = assignment.course
    return AssignmentResponse(
        id=assignment.id,
        course_id=assignment.course_id,
        course_name=course.name if course else None,
        course_code=course.course_code if course else None,
        name=assignment.name,
        description=assignment.description,
        due_date=assignment.due_date.isoformat(),
        status=assignment.status,
        priority=assignment.priority,
        is_overdue=assignment.is_overdue,
        days_until_due=assignment.days_until_due,
        created_at=assignment.created_at.isoformat(),
        updated_at=isoformat(assignment.updated_at),
        completed_at=isoformat(assignment.completed_at),
    )


def _list_response(assignments: list[Assignment]) -> AssignmentListResponse:
    return AssignmentListResponse(
        assignments=[assignment_to_response(a) for a in assignments],
        total=len(assignments),
    )


@router.get("", response_model=AssignmentListResponse)
def list_assignments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _list_response(assignment_service.get_user_assignments(db, current_user.id))


@router.get("/upcoming", response_model=AssignmentListResponse)
def list_upcoming(
    days: Optional[int] = Query(default=None, ge=0, le=365),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Open assignments due within the next `days` days (default from settings)."""
    return _list_response(assignment_service.get_upcoming_assignments(db, current_user.id, days))


@router.get("/overdue", response_model=AssignmentListResponse)
def list_overdue(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _list_response(assignment_service.get_overdue_assignments(db, current_user.id))


@router.post("", response_model=AssignmentResponse, status_code=201)
def create_assignment(
    req: AssignmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        assignment = assignment_service.create_assignment(
            db,
            current_user.id,
            course_id=req.course_id,
            name=req.name,
            description=req.description,
            due_date=req.due_date,
            status=req.status.value,
            priority=req.priority.value,
        )
    except DomainError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return assignment_to_response(assignment_service.get_assignment(db, assignment.id, current_user.id))


@router.get("/{assignment_id}", response_model=AssignmentResponse)
def get_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    assignment = assignment_service.get_assignment(db, assignment_id, current_user.id)
    if not assignment:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return assignment_to_response(assignment)


@router.put("/{assignment_id}", response_model=AssignmentResponse)
def update_assignment(
    assignment_id: int,
    req: AssignmentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    changes = req.model_dump(exclude_unset=True)
    for key in ("status", "priority"):
        if changes.get(key) is not None:
            changes[key] = changes[key].value
    try:
        updated = assignment_service.update_assignment(db, assignment_id, current_user.id, changes)
    except DomainError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not updated:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return assignment_to_response(assignment_service.get_assignment(db, assignment_id, current_user.id))


@router.patch("/{assignment_id}/status", response_model=AssignmentResponse)
def update_assignment_status(
    assignment_id: int,
    req: AssignmentStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not assignment_service.update_assignment_status(db, assignment_id, req.status.value, current_user.id):
        raise HTTPException(status_code=404, detail="Assignment not found")
    return assignment_to_response(assignment_service.get_assignment(db, assignment_id, current_user.id))


@router.delete("/{assignment_id}", status_code=204)
def delete_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not assignment_service.delete_assignment(db, assignment_id, current_user.id):
        raise HTTPException(status_code=404, detail="Assignment not found")
