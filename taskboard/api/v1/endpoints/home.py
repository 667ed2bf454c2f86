"""Dashboard views: active project, my work, assigned tasks, recent activity."""

from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.constants.constants import PROGRESS_FILTERS
from taskboard.core.database import aget_db
from taskboard.core.errors import ErrorKind, ServiceError
from taskboard.core.security import get_current_user
from taskboard.models.user import User
from taskboard.schemas.projectSchema import ProjectResponse
from taskboard.schemas.taskSchema import TaskResponse, TaskWithAssignees
from taskboard.services import ProjectService, TaskService

router = APIRouter(
    prefix="/home",
    tags=["home"]
)


@router.get("/project", response_model=ProjectResponse)
async def get_active_project(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    """The most recently created project of the current user."""
    return await ProjectService.get_latest_project(db, current_user.id)


@router.get("/mywork", response_model=List[TaskResponse])
async def get_tasks_and_progress(
    progress: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    """
    Tasks of the current user.
    Optional filter: progress (to_do, in_progress, completed)
    """
    progress_filter = None
    if progress:
        progress_filter = PROGRESS_FILTERS.get(progress)
        if progress_filter is None:
            raise ServiceError(ErrorKind.invalid_format, f"Invalid progress filter: {progress}")

    return await TaskService.get_tasks_by_progress(db, current_user.id, progress_filter)


@router.get("/assigned", response_model=List[TaskWithAssignees])
async def get_assigned_tasks(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    """Tasks the current user is assigned to, with every assignee."""
    return await TaskService.get_assigned_tasks(db, current_user.id)


@router.get("/activities", response_model=List[TaskResponse])
async def get_activities(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    return await TaskService.get_tasks(db, current_user.id)
