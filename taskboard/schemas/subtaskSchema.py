from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from taskboard.constants.constants import Priority, Progress
from taskboard.schemas.userSchema import UserResponse


class SubTaskResponse(BaseModel):
    id: int
    task_id: int
    user_id: int
    title: str
    description: Optional[str]
    created_at: datetime
    updated_at: datetime
    due_date: Optional[datetime]
    priority: Priority
    progress: Progress
    completed: bool

    class Config:
        from_attributes = True


class SubTaskWithAssignees(BaseModel):
    sub_task: SubTaskResponse
    assignees: List[UserResponse]


class SubTaskWithAssignedUsers(BaseModel):
    sub_task: SubTaskResponse
    assignees: List[int]
    task_id: int
    assigned_at: datetime


class SubTaskCreateRequest(BaseModel):
    """Request schema for creating a subtask. Dates use DD-MM-YYYY."""
    task_id: int
    title: str = Field(..., min_length=1, max_length=200)
    description: str
    created_at: Optional[str] = None
    due_date: Optional[str] = None
    priority: Priority = Priority.Medium
    progress: Progress = Progress.ToDo
    assigned_users: Optional[List[int]] = None


class SubTaskUpdateRequest(BaseModel):
    """Request schema for updating a subtask. Only supplied fields change."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    completed: Optional[bool] = None
    progress: Optional[Progress] = None
    priority: Optional[Priority] = None
    created_at: Optional[str] = None
    due_date: Optional[str] = None
    assigned_users: Optional[List[int]] = None
