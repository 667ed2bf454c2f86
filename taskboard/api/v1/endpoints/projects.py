"""Project router."""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.database import aget_db
from taskboard.core.security import get_current_user
from taskboard.models.user import User
from taskboard.schemas.projectSchema import ProjectCreateRequest, ProjectResponse
from taskboard.services import ProjectService

router = APIRouter(
    prefix="/projects",
    tags=["projects"]
)


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    return await ProjectService.create_project(
        db, project_data.title, project_data.description, current_user.id
    )


@router.get("", response_model=List[ProjectResponse])
async def get_projects(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    """Projects created by the current user, newest first."""
    return await ProjectService.get_projects(db, current_user.id)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    """
    Get a project.
    Creators can always read it; other users need an access grant on one of its tasks.
    """
    return await ProjectService.get_project_by_id(db, project_id, current_user.id)


@router.delete("/{project_id}")
async def delete_project(
    project_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    await ProjectService.delete_project(db, project_id, current_user.id)
    return {
        "message": "Project deleted successfully",
        "project_id": project_id
    }
