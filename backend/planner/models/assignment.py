"""Assignment model: coursework with a due date and a status."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from planner.database import Base, utcnow
from planner.models.enums import AssignmentStatus, Priority


class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(DateTime, nullable=False, index=True)
    status = Column(String(20), nullable=False, default=AssignmentStatus.NOT_STARTED.value)  # NotStarted | InProgress | Completed
    priority = Column(String(10), nullable=False, default=Priority.MEDIUM.value)  # Low | Medium | High
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    # Relationships
    course = relationship("Course", back_populates="assignments")
    user = relationship("User", back_populates="assignments")

    @property
    def is_overdue(self) -> bool:
        return self.status != AssignmentStatus.COMPLETED.value and self.due_date < utcnow()

    @property
    def days_until_due(self) -> int:
        return (self.due_date.date() - utcnow().date()).days
