"""SubTask model and its assignee join table."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from taskboard.constants.constants import Priority, Progress
from taskboard.models.base import Base
from taskboard.utils.clock import utcnow


class SubTask(Base):
    """Model representing a unit of work under a task."""

    __tablename__ = "sub_tasks"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)
    due_date = Column(DateTime, nullable=True)
    priority = Column(SQLEnum(Priority), nullable=False, default=Priority.Medium)
    progress = Column(SQLEnum(Progress), nullable=False, default=Progress.ToDo)
    completed = Column(Boolean, nullable=False, default=False)
    task = relationship("Task", back_populates="subtasks")
    assignees = relationship(
        "SubTaskAssignee",
        back_populates="sub_task",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class SubTaskAssignee(Base):
    """Users responsible for a subtask."""

    __tablename__ = "subtask_assignees"
    sub_task_id = Column(Integer, ForeignKey("sub_tasks.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False)
    assigned_at = Column(DateTime, default=utcnow, nullable=True)
    sub_task = relationship("SubTask", back_populates="assignees")
