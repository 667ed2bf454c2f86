"""SubTask router."""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.database import aget_db
from taskboard.core.security import get_current_user
from taskboard.models.user import User
from taskboard.schemas.subtaskSchema import (
    SubTaskCreateRequest,
    SubTaskResponse,
    SubTaskUpdateRequest,
    SubTaskWithAssignedUsers,
    SubTaskWithAssignees,
)
from taskboard.services import SubTaskService

router = APIRouter(
    prefix="/subtasks",
    tags=["subtasks"]
)


@router.post("", response_model=SubTaskResponse, status_code=status.HTTP_201_CREATED)
async def create_subtask(
    subtask: SubTaskCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    return await SubTaskService.create_subtask(
        db,
        subtask.task_id,
        subtask.title,
        subtask.description,
        subtask.created_at,
        subtask.due_date,
        subtask.priority,
        subtask.progress,
        current_user.id,
        subtask.assigned_users,
    )


@router.get("", response_model=List[SubTaskResponse])
async def get_sub_tasks(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    """Subtasks created by the current user."""
    return await SubTaskService.get_sub_tasks(db, current_user.id)


@router.get("/{task_id}", response_model=List[SubTaskWithAssignees])
async def get_sub_tasks_with_assignees(
    task_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    return await SubTaskService.get_sub_tasks_with_assignees(db, task_id, current_user.id)


@router.patch("/{task_id}/{sub_task_id}", response_model=SubTaskWithAssignedUsers)
async def update_subtask(
    task_id: int,
    sub_task_id: int,
    subtask_update: SubTaskUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    return await SubTaskService.update_subtask(
        db,
        sub_task_id,
        task_id,
        current_user.id,
        title=subtask_update.title,
        description=subtask_update.description,
        completed=subtask_update.completed,
        progress=subtask_update.progress,
        priority=subtask_update.priority,
        created_at=subtask_update.created_at,
        due_date=subtask_update.due_date,
        assigned_users=subtask_update.assigned_users,
    )


@router.delete("/{task_id}/{sub_task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subtask(
    task_id: int,
    sub_task_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    await SubTaskService.delete_subtask(db, sub_task_id, task_id, current_user.id)
