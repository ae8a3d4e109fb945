"""Dashboard router: aggregates, reminders and weather."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from planner.config import settings
from planner.database import get_db
from planner.models.user import User
from planner.schemas.dashboard import DashboardResponse, WeatherResponse, ReminderResponse
from planner.middleware.auth import get_current_user
from planner.services import dashboard_service, reminder_service
from planner.services.email_sender import EmailSender, get_email_sender
from planner.services.weather_service import OpenWeatherMapService, get_weather_service

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    days: Optional[int] = Query(default=None, ge=0, le=365),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    window = settings.UPCOMING_WINDOW_DAYS if days is None else days
    data = dashboard_service.get_dashboard_data(db, current_user.id, days=window)
    return DashboardResponse(
        total_courses=data.total_courses,
        total_assignments=data.total_assignments,
        completed_assignments=data.completed_assignments,
        upcoming_assignments=data.upcoming_assignments,
        overdue_assignments=data.overdue_assignments,
        total_group_projects=data.total_group_projects,
        completion_percentage=data.completion_percentage,
        upcoming_window_days=window,
    )


@router.post("/reminders", response_model=ReminderResponse)
def send_reminder(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    sender: EmailSender = Depends(get_email_sender),
):
    """Email the current user a digest of upcoming and overdue assignments."""
    sent = reminder_service.send_upcoming_reminder(db, current_user, sender)
    message = "Reminder sent." if sent else "No reminder sent."
    return ReminderResponse(sent=sent, message=message)


@router.get("/weather", response_model=WeatherResponse)
def get_weather(
    city: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    weather: OpenWeatherMapService = Depends(get_weather_service),
):
    """Current weather for a city (defaults to the configured city)."""
    if not weather.api_key:
        raise HTTPException(status_code=503, detail="Weather is not configured")
    try:
        summary = weather.get_current_weather(city or settings.OPENWEATHERMAP_DEFAULT_CITY)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if summary is None:
        raise HTTPException(status_code=404, detail="Weather not available")
    return WeatherResponse(
        city=summary.city,
        temperature_c=summary.temperature_c,
        description=summary.description,
        icon=summary.icon,
    )
