"""Task management router."""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.database import aget_db
from taskboard.core.security import get_current_user
from taskboard.models.user import User
from taskboard.schemas.taskSchema import (
    TaskAccessResponse,
    TaskCreateRequest,
    TaskResponse,
    TaskUpdateRequest,
    TaskWithAssignedUsers,
    TaskWithSubTasks,
)
from taskboard.services import TaskService

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"]
)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    """
    Create a new task in a project.
    due_date is optional and uses DD-MM-YYYY. An unknown project is a 409.
    """
    return await TaskService.create_task(
        db,
        task_data.description,
        task_data.reward,
        task_data.project_id,
        current_user.id,
        task_data.title,
        task_data.due_date,
    )


@router.get("", response_model=List[TaskResponse])
async def get_tasks(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    """Get all tasks created by the current user."""
    return await TaskService.get_tasks(db, current_user.id)


@router.get("/{task_id}", response_model=TaskWithSubTasks)
async def get_task_by_id(
    task_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    """
    Get a task with its subtasks.
    Only the owner of the task's project can read it.
    """
    return await TaskService.get_task_by_id(db, task_id, current_user.id)


@router.patch("/{task_id}", response_model=TaskWithAssignedUsers)
async def update_task(
    task_id: int,
    task_update: TaskUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    """
    Update task details and, optionally, replace its assignees.
    Allowed for the task creator and users holding an access grant.
    """
    return await TaskService.update_task(
        db,
        task_id,
        current_user.id,
        description=task_update.description,
        reward=task_update.reward,
        completed=task_update.completed,
        title=task_update.title,
        progress=task_update.progress,
        priority=task_update.priority,
        due_date=task_update.due_date,
        assigned_users=task_update.assigned_users,
    )


@router.delete("/{task_id}")
async def delete_task(
    task_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    await TaskService.delete_task(db, task_id, current_user.id)
    return {
        "message": "Task deleted successfully",
        "task_id": task_id
    }


@router.post(
    "/{task_id}/access/{user_id}",
    response_model=TaskAccessResponse,
    status_code=status.HTTP_201_CREATED,
)
async def grant_task_access(
    task_id: int,
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    """Allow another user to act on a task. Only the task creator can grant access."""
    return await TaskService.grant_task_access(db, task_id, current_user.id, user_id)


@router.delete("/{task_id}/access/{user_id}")
async def revoke_task_access(
    task_id: int,
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    await TaskService.revoke_task_access(db, task_id, current_user.id, user_id)
    return {
        "message": "Access revoked successfully",
        "task_id": task_id,
        "user_id": user_id
    }
