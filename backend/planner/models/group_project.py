"""GroupProject, ProjectMember and ProjectTask models."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from planner.database import Base, utcnow
from planner.models.enums import TaskStatus, ROLE_MEMBER


class GroupProject(Base):
    __tablename__ = "group_projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=True)

    # Relationships
    members = relationship(
        "ProjectMember",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ProjectMember.joined_at",
    )
    tasks = relationship(
        "ProjectTask",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ProjectTask.created_at",
    )

    @property
    def total_tasks(self) -> int:
        return len(self.tasks)

    @property
    def completed_tasks(self) -> int:
        return sum(1 for t in self.tasks if t.status == TaskStatus.COMPLETED.value)

    @property
    def completion_percentage(self) -> float:
        total = self.total_tasks
        return self.completed_tasks / total * 100 if total > 0 else 0.0


class ProjectMember(Base):
    __tablename__ = "project_members"
    __table_args__ = (
        UniqueConstraint("group_project_id", "user_id", name="uq_project_members_project_user"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    role = Column(String(50), nullable=False, default=ROLE_MEMBER)  # Owner | Member | Contributor
    group_project_id = Column(Integer, ForeignKey("group_projects.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    joined_at = Column(DateTime, nullable=False, default=utcnow)

    # Relationships
    project = relationship("GroupProject", back_populates="members")
    user = relationship("User", back_populates="project_memberships")


class ProjectTask(Base):
    __tablename__ = "project_tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=TaskStatus.NOT_STARTED.value)
    due_date = Column(DateTime, nullable=True)
    group_project_id = Column(Integer, ForeignKey("group_projects.id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    # Relationships
    project = relationship("GroupProject", back_populates="tasks")
    assigned_user = relationship("User", back_populates="assigned_tasks")

    @property
    def is_overdue(self) -> bool:
        return (
            self.status != TaskStatus.COMPLETED.value
            and self.due_date is not None
            and self.due_date < utcnow()
        )
