"""Task model plus its assignee and access-grant join tables."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from taskboard.constants.constants import Priority, Progress
from taskboard.models.base import Base
from taskboard.utils.clock import utcnow


class Task(Base):
    """Model representing a task inside a project."""

    __tablename__ = "tasks"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    reward = Column(Integer, nullable=False, default=0)
    completed = Column(Boolean, nullable=False, default=False)
    progress = Column(SQLEnum(Progress), nullable=False, default=Progress.ToDo)
    priority = Column(SQLEnum(Priority), nullable=False, default=Priority.Medium)
    due_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    project = relationship("Project", back_populates="tasks")
    subtasks = relationship(
        "SubTask",
        back_populates="task",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    assignees = relationship(
        "TaskAssignee",
        back_populates="task",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    access_grants = relationship(
        "TaskAccess",
        back_populates="task",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class TaskAssignee(Base):
    """Users responsible for a task. One row per (task, user) pair."""

    __tablename__ = "task_assignees"
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    assigned_at = Column(DateTime, default=utcnow, nullable=True)
    task = relationship("Task", back_populates="assignees")


class TaskAccess(Base):
    """Explicit permission for a non-owner to act on a task."""

    __tablename__ = "task_access"
    __table_args__ = (UniqueConstraint("task_id", "user_id", name="uq_task_access_task_user"),)
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    granted_at = Column(DateTime, default=utcnow, nullable=False)
    task = relationship("Task", back_populates="access_grants")
