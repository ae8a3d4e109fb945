"""Courses router: owner-scoped course management."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from planner.database import get_db
from planner.models.course import Course
from planner.models.user import User
from planner.schemas.course import (
    CourseCreate,
    CourseUpdate,
    CourseResponse,
    CourseDetailResponse,
    CourseListResponse,
)
from planner.schemas.assignment import AssignmentListResponse
from planner.schemas.common import isoformat
from planner.middleware.auth import get_current_user
from planner.routers.assignments import assignment_to_response
from planner.services import assignment_service, course_service
from planner.services.errors import ConflictError

router = APIRouter(prefix="/api/courses", tags=["courses"])


def _course_to_response(course: Course) -> CourseResponse:
    return CourseResponse(
        id=course.id,
        name=course.name,
        course_code=course.course_code,
        semester=course.semester,
        description=course.description,
        color=course.color,
        created_at=course.created_at.isoformat(),
        updated_at=isoformat(course.updated_at),
    )


@router.get("", response_model=CourseListResponse)
def list_courses(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    courses = course_service.get_user_courses(db, current_user.id)
    return CourseListResponse(courses=[_course_to_response(c) for c in courses], total=len(courses))


@router.post("", response_model=CourseResponse, status_code=201)
def create_course(
    req: CourseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        course = course_service.create_course(
            db,
            current_user.id,
            name=req.name,
            course_code=req.course_code,
            semester=req.semester,
            description=req.description,
            color=req.color,
        )
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _course_to_response(course)


@router.get("/{course_id}", response_model=CourseDetailResponse)
def get_course(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get a course with its assignments."""
    course = course_service.get_course_with_assignments(db, course_id, current_user.id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")

    base = _course_to_response(course)
    return CourseDetailResponse(
        **base.model_dump(),
        assignments=[assignment_to_response(a) for a in course.assignments],
    )


@router.put("/{course_id}", response_model=CourseResponse)
def update_course(
    course_id: int,
    req: CourseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        updated = course_service.update_course(db, course_id, current_user.id, req.model_dump(exclude_unset=True))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not updated:
        raise HTTPException(status_code=404, detail="Course not found")
    return _course_to_response(course_service.get_course(db, course_id, current_user.id))


@router.delete("/{course_id}", status_code=204)
def delete_course(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a course and all of its assignments."""
    if not course_service.delete_course(db, course_id, current_user.id):
        raise HTTPException(status_code=404, detail="Course not found")


@router.get("/{course_id}/assignments", response_model=AssignmentListResponse)
def list_course_assignments(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    assignments = assignment_service.get_course_assignments(db, course_id, current_user.id)
    return AssignmentListResponse(
        assignments=[assignment_to_response(a) for a in assignments],
        total=len(assignments),
    )
