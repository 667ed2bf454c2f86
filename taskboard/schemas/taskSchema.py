from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from taskboard.constants.constants import Priority, Progress
from taskboard.schemas.subtaskSchema import SubTaskResponse
from taskboard.schemas.userSchema import UserResponse


class TaskResponse(BaseModel):
    id: int
    project_id: int
    user_id: Optional[int]
    title: str
    description: str
    reward: int
    completed: bool
    progress: Progress
    priority: Priority
    due_date: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class TaskWithSubTasks(BaseModel):
    task: TaskResponse
    subtasks: List[SubTaskResponse]


class TaskWithAssignedUsers(BaseModel):
    task: TaskResponse
    assigned_users: List[int]


class TaskWithAssignees(BaseModel):
    task: TaskResponse
    assignees: List[UserResponse]


class TaskAccessResponse(BaseModel):
    task_id: int
    user_id: int
    granted_at: datetime

    class Config:
        from_attributes = True


class TaskCreateRequest(BaseModel):
    """Request schema for creating a new task. due_date uses DD-MM-YYYY."""
    description: str = Field(..., min_length=1)
    reward: int = 0
    project_id: int
    title: str = Field(..., min_length=1, max_length=200)
    due_date: Optional[str] = None


class TaskUpdateRequest(BaseModel):
    """Request schema for updating a task. assigned_users replaces the whole set."""
    description: Optional[str] = None
    reward: Optional[int] = None
    completed: Optional[bool] = None
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    progress: Optional[Progress] = None
    priority: Optional[Priority] = None
    due_date: Optional[str] = None
    assigned_users: Optional[List[int]] = None
