"""SubTask business rules. Mirrors the task rules, scoped to one parent task."""

import logging
from typing import Dict, Iterable, List, Optional
from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.constants.constants import Priority, Progress
from taskboard.core.errors import ErrorKind, ServiceError
from taskboard.models.subtask import SubTask, SubTaskAssignee
from taskboard.models.task import Task
from taskboard.models.user import User
from taskboard.schemas.subtaskSchema import (
    SubTaskResponse,
    SubTaskWithAssignedUsers,
    SubTaskWithAssignees,
)
from taskboard.schemas.userSchema import UserResponse
from taskboard.services.TaskService import unique_user_ids
from taskboard.utils.access_control import validate_task_ownership
from taskboard.utils.clock import utcnow
from taskboard.utils.date_validation import (
    parse_and_validate_created_at,
    parse_and_validate_due_date,
)

logger = logging.getLogger(__name__)


def _subtask_not_found() -> ServiceError:
    return ServiceError(ErrorKind.not_found, "Subtask not found or unauthorized")


def _new_assignees(sub_task_id: int, task_id: int, user_ids: Iterable[int]) -> List[SubTaskAssignee]:
    assigned_at = utcnow()
    return [
        SubTaskAssignee(
            sub_task_id=sub_task_id,
            user_id=assignee_id,
            task_id=task_id,
            assigned_at=assigned_at,
        )
        for assignee_id in unique_user_ids(user_ids)
    ]


async def create_subtask(
    db: AsyncSession,
    task_id: int,
    title: str,
    description: str,
    created_at: Optional[str],
    due_date: Optional[str],
    priority: Priority,
    progress: Progress,
    user_id: int,
    assigned_users: Optional[List[int]] = None,
) -> SubTask:
    """
    Create a subtask under an existing task.

    Raises TaskNotFound when the parent task does not exist. The subtask
    and its assignee rows are written in one transaction.
    """
    parent = await db.get(Task, task_id)
    if parent is None:
        raise ServiceError(ErrorKind.task_not_found, f"Task with id {task_id} not found")

    parsed_due_date = parse_and_validate_due_date(due_date)
    parsed_created_at = parse_and_validate_created_at(created_at)

    subtask = SubTask(
        task_id=task_id,
        title=title,
        description=description,
        created_at=parsed_created_at,
        updated_at=utcnow(),
        due_date=parsed_due_date,
        priority=priority,
        progress=progress,
        user_id=user_id,
        completed=False,
    )

    try:
        db.add(subtask)
        await db.flush()

        if assigned_users:
            db.add_all(_new_assignees(subtask.id, task_id, assigned_users))

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(subtask)
    logger.info(f"User {user_id} created subtask {subtask.id} under task {task_id}")
    return subtask


async def get_sub_tasks(db: AsyncSession, user_id: int) -> List[SubTask]:
    result = await db.execute(
        select(SubTask).where(SubTask.user_id == user_id).order_by(SubTask.id)
    )
    return list(result.scalars().all())


async def get_sub_tasks_with_assignees(
    db: AsyncSession,
    task_id: int,
    user_id: int,
) -> List[SubTaskWithAssignees]:
    """All subtasks of a task together with their assigned users."""
    await validate_task_ownership(db, task_id, user_id)

    subtasks_query = await db.execute(
        select(SubTask).where(SubTask.task_id == task_id).order_by(SubTask.id)
    )
    subtasks = subtasks_query.scalars().all()
    if not subtasks:
        return []

    assignees_query = await db.execute(
        select(SubTaskAssignee.sub_task_id, User)
        .join(User, User.id == SubTaskAssignee.user_id)
        .where(SubTaskAssignee.sub_task_id.in_([s.id for s in subtasks]))
        .order_by(User.id)
    )
    assignees_by_subtask: Dict[int, List[UserResponse]] = {}
    for sub_task_id, user in assignees_query.all():
        assignees_by_subtask.setdefault(sub_task_id, []).append(UserResponse.model_validate(user))

    return [
        SubTaskWithAssignees(
            sub_task=SubTaskResponse.model_validate(subtask),
            assignees=assignees_by_subtask.get(subtask.id, []),
        )
        for subtask in subtasks
    ]


async def _get_scoped_subtask(
    db: AsyncSession,
    sub_task_id: int,
    task_id: int,
    user_id: int,
) -> SubTask:
    # Missing and foreign subtasks are reported the same way.
    result = await db.execute(
        select(SubTask).where(
            and_(
                SubTask.id == sub_task_id,
                SubTask.task_id == task_id,
                SubTask.user_id == user_id,
            )
        )
    )
    subtask = result.scalar_one_or_none()
    if subtask is None:
        raise _subtask_not_found()
    return subtask


async def update_subtask(
    db: AsyncSession,
    sub_task_id: int,
    task_id: int,
    user_id: int,
    title: Optional[str] = None,
    description: Optional[str] = None,
    completed: Optional[bool] = None,
    progress: Optional[Progress] = None,
    priority: Optional[Priority] = None,
    created_at: Optional[str] = None,
    due_date: Optional[str] = None,
    assigned_users: Optional[List[int]] = None,
) -> SubTaskWithAssignedUsers:
    """
    Apply a partial update to a subtask the user created under task_id.

    Dates are validated only when supplied. assigned_users replaces the
    assignee set; everything commits or rolls back together.
    """
    parsed_created_at = (
        parse_and_validate_created_at(created_at) if created_at is not None else None
    )
    parsed_due_date = parse_and_validate_due_date(due_date)

    subtask = await _get_scoped_subtask(db, sub_task_id, task_id, user_id)

    try:
        if title is not None:
            subtask.title = title
        if description is not None:
            subtask.description = description
        if completed is not None:
            subtask.completed = completed
        if progress is not None:
            subtask.progress = progress
        if priority is not None:
            subtask.priority = priority
        if parsed_created_at is not None:
            subtask.created_at = parsed_created_at
        if parsed_due_date is not None:
            subtask.due_date = parsed_due_date
        subtask.updated_at = utcnow()

        if assigned_users is not None:
            await db.execute(
                delete(SubTaskAssignee).where(SubTaskAssignee.sub_task_id == sub_task_id)
            )
            db.add_all(_new_assignees(sub_task_id, task_id, assigned_users))

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(subtask)

    assignees_query = await db.execute(
        select(SubTaskAssignee.user_id)
        .where(SubTaskAssignee.sub_task_id == sub_task_id)
        .order_by(SubTaskAssignee.user_id)
    )

    logger.info(f"User {user_id} updated subtask {sub_task_id}")
    return SubTaskWithAssignedUsers(
        sub_task=SubTaskResponse.model_validate(subtask),
        assignees=list(assignees_query.scalars().all()),
        task_id=task_id,
        assigned_at=utcnow(),
    )


async def delete_subtask(
    db: AsyncSession,
    sub_task_id: int,
    task_id: int,
    user_id: int,
) -> None:
    subtask = await _get_scoped_subtask(db, sub_task_id, task_id, user_id)

    try:
        await db.execute(
            delete(SubTaskAssignee).where(SubTaskAssignee.sub_task_id == sub_task_id)
        )
        await db.delete(subtask)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(f"User {user_id} deleted subtask {sub_task_id}")
