"""Project creation, lookup and removal."""

import logging
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.errors import ErrorKind, ServiceError
from taskboard.models.project import Project
from taskboard.utils.access_control import validate_user_project_access
from taskboard.utils.clock import utcnow

logger = logging.getLogger(__name__)


async def create_project(
    db: AsyncSession,
    title: str,
    description: Optional[str],
    user_id: int,
) -> Project:
    project = Project(
        title=title,
        description=description,
        user_id=user_id,
        created_at=utcnow(),
    )
    db.add(project)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(project)

    logger.info(f"User {user_id} created project {project.id}")
    return project


async def get_projects(db: AsyncSession, user_id: int) -> List[Project]:
    result = await db.execute(
        select(Project)
        .where(Project.user_id == user_id)
        .order_by(Project.created_at.desc(), Project.id.desc())
    )
    return list(result.scalars().all())


async def get_latest_project(db: AsyncSession, user_id: int) -> Project:
    """The most recent project is treated as the user's active one."""
    result = await db.execute(
        select(Project)
        .where(Project.user_id == user_id)
        .order_by(Project.created_at.desc(), Project.id.desc())
        .limit(1)
    )
    project = result.scalar_one_or_none()
    if project is None:
        raise ServiceError(ErrorKind.not_found, "Project not found")
    return project


async def get_project_by_id(db: AsyncSession, project_id: int, user_id: int) -> Project:
    return await validate_user_project_access(db, user_id, project_id)


async def delete_project(db: AsyncSession, project_id: int, user_id: int) -> None:
    """Only the creator may delete a project; its tasks go with it."""
    project = await validate_user_project_access(db, user_id, project_id)
    if project.user_id != user_id:
        raise ServiceError(
            ErrorKind.permission_denied,
            "You are not authorized to perform this action",
        )

    try:
        await db.delete(project)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info(f"User {user_id} deleted project {project_id}")
