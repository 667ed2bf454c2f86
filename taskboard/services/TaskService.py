"""Task business rules: creation, reads, partial updates, access grants."""

import logging
from typing import Dict, Iterable, List, Optional
from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.constants.constants import Priority, Progress
from taskboard.core.errors import ErrorKind, ServiceError
from taskboard.models.project import Project
from taskboard.models.subtask import SubTask, SubTaskAssignee
from taskboard.models.task import Task, TaskAccess, TaskAssignee
from taskboard.models.user import User
from taskboard.schemas.subtaskSchema import SubTaskResponse
from taskboard.schemas.taskSchema import (
    TaskResponse,
    TaskWithAssignedUsers,
    TaskWithAssignees,
    TaskWithSubTasks,
)
from taskboard.schemas.userSchema import UserResponse
from taskboard.utils.access_control import validate_task_ownership
from taskboard.utils.clock import utcnow
from taskboard.utils.date_validation import parse_and_validate_due_date

logger = logging.getLogger(__name__)


def unique_user_ids(user_ids: Iterable[int]) -> List[int]:
    """Drop repeated ids while keeping the caller's order."""
    return list(dict.fromkeys(user_ids))


async def create_task(
    db: AsyncSession,
    description: str,
    reward: int,
    project_id: int,
    user_id: int,
    title: str,
    due_date: Optional[str] = None,
) -> Task:
    """
    Create a task in a project.

    New tasks start as ToDo, Medium priority and not completed. An unknown
    project_id is left to the store's foreign key, so it surfaces as an
    IntegrityError rather than being ignored.
    """
    parsed_due_date = parse_and_validate_due_date(due_date)

    task = Task(
        description=description,
        reward=reward,
        completed=False,
        project_id=project_id,
        user_id=user_id,
        title=title,
        progress=Progress.ToDo,
        priority=Priority.Medium,
        created_at=utcnow(),
        due_date=parsed_due_date,
    )
    db.add(task)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(task)

    logger.info(f"User {user_id} created task {task.id} in project {project_id}")
    return task


async def get_tasks(db: AsyncSession, user_id: int) -> List[Task]:
    result = await db.execute(
        select(Task).where(Task.user_id == user_id).order_by(Task.id)
    )
    return list(result.scalars().all())


async def get_tasks_by_progress(
    db: AsyncSession,
    user_id: int,
    progress: Optional[Progress] = None,
) -> List[Task]:
    query = select(Task).where(Task.user_id == user_id)
    if progress is not None:
        query = query.where(Task.progress == progress)
    result = await db.execute(query.order_by(Task.id))
    return list(result.scalars().all())


async def get_task_by_id(db: AsyncSession, task_id: int, user_id: int) -> TaskWithSubTasks:
    """
    Read a task with its subtasks.

    Only the owner of the task's project may read it. Anyone else gets the
    same NotFound as for a missing task.
    """
    task_query = await db.execute(
        select(Task)
        .join(Project, Project.id == Task.project_id)
        .where(
            and_(
                Task.id == task_id,
                Project.user_id == user_id,
            )
        )
    )
    task = task_query.scalar_one_or_none()

    if task is None:
        raise ServiceError(ErrorKind.not_found, "Task not found")

    subtasks_query = await db.execute(
        select(SubTask).where(SubTask.task_id == task.id).order_by(SubTask.id)
    )
    subtasks = subtasks_query.scalars().all()

    return TaskWithSubTasks(
        task=TaskResponse.model_validate(task),
        subtasks=[SubTaskResponse.model_validate(s) for s in subtasks],
    )


async def get_task_assignee_ids(db: AsyncSession, task_id: int) -> List[int]:
    result = await db.execute(
        select(TaskAssignee.user_id)
        .where(TaskAssignee.task_id == task_id)
        .order_by(TaskAssignee.user_id)
    )
    return list(result.scalars().all())


async def replace_task_assignees(db: AsyncSession, task_id: int, user_ids: Iterable[int]) -> None:
    """Clear the task's assignee set and insert the new one. The caller commits."""
    await db.execute(delete(TaskAssignee).where(TaskAssignee.task_id == task_id))
    assigned_at = utcnow()
    db.add_all([
        TaskAssignee(task_id=task_id, user_id=assignee_id, assigned_at=assigned_at)
        for assignee_id in unique_user_ids(user_ids)
    ])
    await db.flush()


async def update_task(
    db: AsyncSession,
    task_id: int,
    user_id: int,
    description: Optional[str] = None,
    reward: Optional[int] = None,
    completed: Optional[bool] = None,
    title: Optional[str] = None,
    progress: Optional[Progress] = None,
    priority: Optional[Priority] = None,
    due_date: Optional[str] = None,
    assigned_users: Optional[List[int]] = None,
) -> TaskWithAssignedUsers:
    """
    Apply a partial update. Fields left as None are untouched.

    When assigned_users is given it replaces the assignee set outright.
    Field changes and the assignee replacement commit together.
    """
    task = await validate_task_ownership(db, task_id, user_id)
    parsed_due_date = parse_and_validate_due_date(due_date)

    try:
        if description is not None:
            task.description = description
        if reward is not None:
            task.reward = reward
        if completed is not None:
            task.completed = completed
        if title is not None:
            task.title = title
        if progress is not None:
            task.progress = progress
        if priority is not None:
            task.priority = priority
        if parsed_due_date is not None:
            task.due_date = parsed_due_date

        if assigned_users is not None:
            await replace_task_assignees(db, task.id, assigned_users)

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(task)
    logger.info(f"User {user_id} updated task {task_id}")

    return TaskWithAssignedUsers(
        task=TaskResponse.model_validate(task),
        assigned_users=await get_task_assignee_ids(db, task.id),
    )


async def delete_task(db: AsyncSession, task_id: int, user_id: int) -> None:
    """Only the creator may delete a task. Assignees, grants and subtasks go with it."""
    task = await validate_task_ownership(db, task_id, user_id)
    if task.user_id != user_id:
        raise ServiceError(
            ErrorKind.permission_denied,
            "You are not authorized to perform this action",
        )

    try:
        await db.execute(delete(SubTaskAssignee).where(SubTaskAssignee.task_id == task_id))
        await db.execute(delete(SubTask).where(SubTask.task_id == task_id))
        await db.execute(delete(TaskAssignee).where(TaskAssignee.task_id == task_id))
        await db.execute(delete(TaskAccess).where(TaskAccess.task_id == task_id))
        await db.delete(task)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(f"User {user_id} deleted task {task_id}")


async def _get_owned_task(db: AsyncSession, task_id: int, owner_id: int) -> Task:
    task = await validate_task_ownership(db, task_id, owner_id)
    if task.user_id != owner_id:
        raise ServiceError(
            ErrorKind.permission_denied,
            "You are not authorized to perform this action",
        )
    return task


async def grant_task_access(
    db: AsyncSession,
    task_id: int,
    owner_id: int,
    grantee_id: int,
) -> TaskAccess:
    """Let another user act on a task. Granting twice returns the existing grant."""
    await _get_owned_task(db, task_id, owner_id)

    grantee = await db.get(User, grantee_id)
    if grantee is None:
        raise ServiceError(ErrorKind.not_found, "User not found")

    existing_query = await db.execute(
        select(TaskAccess).where(
            and_(
                TaskAccess.task_id == task_id,
                TaskAccess.user_id == grantee_id,
            )
        )
    )
    existing = existing_query.scalar_one_or_none()
    if existing:
        return existing

    grant = TaskAccess(task_id=task_id, user_id=grantee_id, granted_at=utcnow())
    db.add(grant)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(grant)

    logger.info(f"User {owner_id} granted user {grantee_id} access to task {task_id}")
    return grant


async def revoke_task_access(
    db: AsyncSession,
    task_id: int,
    owner_id: int,
    grantee_id: int,
) -> None:
    await _get_owned_task(db, task_id, owner_id)

    try:
        result = await db.execute(
            delete(TaskAccess).where(
                and_(
                    TaskAccess.task_id == task_id,
                    TaskAccess.user_id == grantee_id,
                )
            )
        )
        if result.rowcount:
            await db.commit()
    except Exception:
        await db.rollback()
        raise

    if result.rowcount == 0:
        raise ServiceError(ErrorKind.not_found, "Access grant not found")

    logger.info(f"User {owner_id} revoked user {grantee_id} access to task {task_id}")


async def get_assigned_tasks(db: AsyncSession, user_id: int) -> List[TaskWithAssignees]:
    """Tasks the user is assigned to, each with everyone assigned to it."""
    tasks_query = await db.execute(
        select(Task)
        .join(TaskAssignee, TaskAssignee.task_id == Task.id)
        .where(TaskAssignee.user_id == user_id)
        .order_by(Task.id)
    )
    tasks = tasks_query.scalars().all()
    if not tasks:
        return []

    assignees_query = await db.execute(
        select(TaskAssignee.task_id, User)
        .join(User, User.id == TaskAssignee.user_id)
        .where(TaskAssignee.task_id.in_([t.id for t in tasks]))
        .order_by(User.id)
    )
    assignees_by_task: Dict[int, List[UserResponse]] = {}
    for task_id, user in assignees_query.all():
        assignees_by_task.setdefault(task_id, []).append(UserResponse.model_validate(user))

    return [
        TaskWithAssignees(
            task=TaskResponse.model_validate(task),
            assignees=assignees_by_task.get(task.id, []),
        )
        for task in tasks
    ]
