"""Reminder digests for upcoming and overdue assignments."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from planner.config import settings
from planner.database import utcnow
from planner.models.assignment import Assignment
from planner.models.user import User
from planner.repositories import assignment_repository
from planner.services.email_sender import EmailSender

logger = logging.getLogger(__name__)


def _line(assignment: Assignment) -> str:
    course = assignment.course.course_code if assignment.course else "?"
    return f"  - [{course}] {assignment.name} (due {assignment.due_date:%Y-%m-%d %H:%M} UTC, {assignment.priority} priority)"


def build_reminder_body(user: User, upcoming: list[Assignment], overdue: list[Assignment], days: int) -> str:
    lines = [f"Hi {user.first_name},", ""]
    if overdue:
        lines.append(f"Overdue ({len(overdue)}):")
        lines.extend(_line(a) for a in overdue)
        lines.append("")
    if upcoming:
        lines.append(f"Due in the next {days} days ({len(upcoming)}):")
        lines.extend(_line(a) for a in upcoming)
        lines.append("")
    lines.append("Good luck!")
    return "\n".join(lines)


def send_upcoming_reminder(
    db: Session,
    user: User,
    sender: EmailSender,
    days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> bool:
    """Email the user a digest of open assignments. Returns False when there is nothing to send."""
    days = settings.UPCOMING_WINDOW_DAYS if days is None else days
    now = now or utcnow()

    upcoming = assignment_repository.get_upcoming_assignments(db, user.id, days, now)
    overdue = assignment_repository.get_overdue_assignments(db, user.id, now)
    if not upcoming and not overdue:
        return False

    subject = f"Assignment reminder: {len(upcoming)} upcoming, {len(overdue)} overdue"
    sent = sender.send(user.email, subject, build_reminder_body(user, upcoming, overdue, days))
    if not sent:
        logger.warning("Reminder email to user %s was not delivered", user.id)
    return sent
