import logging

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.errors import ErrorKind, ServiceError
from taskboard.models.project import Project
from taskboard.models.task import Task, TaskAccess

logger = logging.getLogger(__name__)


def _permission_denied() -> ServiceError:
    return ServiceError(
        ErrorKind.permission_denied,
        "You are not authorized to perform this action",
    )


async def validate_task_ownership(db: AsyncSession, task_id: int, user_id: int) -> Task:
    """
    Return the task if the user created it or holds an access grant on it.

    A missing task and a task the user may not touch both raise
    PermissionDenied. Store errors are not caught here.
    """
    task_query = await db.execute(select(Task).where(Task.id == task_id))
    task = task_query.scalar_one_or_none()

    if task is None:
        logger.warning(f"Task {task_id} denied to user {user_id}")
        raise _permission_denied()

    if task.user_id == user_id:
        return task

    access_query = await db.execute(
        select(TaskAccess.id).where(
            and_(
                TaskAccess.task_id == task_id,
                TaskAccess.user_id == user_id,
            )
        )
    )
    if access_query.scalar_one_or_none() is not None:
        return task

    logger.warning(f"Task {task_id} denied to user {user_id}")
    raise _permission_denied()


async def validate_user_project_access(db: AsyncSession, user_id: int, project_id: int) -> Project:
    """Return the project if the user created it or holds a grant on one of its tasks."""
    project_query = await db.execute(select(Project).where(Project.id == project_id))
    project = project_query.scalar_one_or_none()

    if project is None:
        logger.warning(f"Project {project_id} denied to user {user_id}")
        raise _permission_denied()

    if project.user_id == user_id:
        return project

    grant_query = await db.execute(
        select(TaskAccess.id)
        .join(Task, Task.id == TaskAccess.task_id)
        .where(
            and_(
                Task.project_id == project_id,
                TaskAccess.user_id == user_id,
            )
        )
        .limit(1)
    )
    if grant_query.scalar_one_or_none() is not None:
        return project

    logger.warning(f"Project {project_id} denied to user {user_id}")
    raise _permission_denied()
