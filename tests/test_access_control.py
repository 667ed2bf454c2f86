# tests/test_access_control.py

import pytest
from sqlalchemy.exc import OperationalError

from taskboard.core.errors import ErrorKind, ServiceError
from taskboard.services import ProjectService, TaskService
from taskboard.utils.access_control import (
    validate_task_ownership,
    validate_user_project_access,
)


async def test_creator_owns_task(db, owner, task):
    found = await validate_task_ownership(db, task.id, owner.id)
    assert found.id == task.id


async def test_stranger_is_denied_task(db, outsider, task):
    with pytest.raises(ServiceError) as exc_info:
        await validate_task_ownership(db, task.id, outsider.id)
    assert exc_info.value.kind == ErrorKind.permission_denied
    assert exc_info.value.status_code == 403


async def test_missing_task_looks_like_denied_task(db, owner):
    with pytest.raises(ServiceError) as exc_info:
        await validate_task_ownership(db, 9999, owner.id)
    assert exc_info.value.kind == ErrorKind.permission_denied
    # no entity details leak through the message
    assert "9999" not in exc_info.value.message


async def test_access_grant_allows_task(db, owner, outsider, task):
    await TaskService.grant_task_access(db, task.id, owner.id, outsider.id)
    found = await validate_task_ownership(db, task.id, outsider.id)
    assert found.id == task.id


async def test_grant_on_other_task_does_not_leak(db, owner, outsider, project, task):
    other = await TaskService.create_task(db, "other", 5, project.id, owner.id, "other", None)
    await TaskService.grant_task_access(db, other.id, owner.id, outsider.id)
    with pytest.raises(ServiceError):
        await validate_task_ownership(db, task.id, outsider.id)


async def test_creator_owns_project(db, owner, project):
    found = await validate_user_project_access(db, owner.id, project.id)
    assert found.id == project.id


async def test_stranger_is_denied_project(db, outsider, project):
    with pytest.raises(ServiceError) as exc_info:
        await validate_user_project_access(db, outsider.id, project.id)
    assert exc_info.value.kind == ErrorKind.permission_denied


async def test_missing_project_is_denied(db, owner):
    with pytest.raises(ServiceError) as exc_info:
        await validate_user_project_access(db, owner.id, 4242)
    assert exc_info.value.kind == ErrorKind.permission_denied


async def test_task_grant_opens_its_project(db, owner, outsider, project, task):
    await TaskService.grant_task_access(db, task.id, owner.id, outsider.id)
    found = await validate_user_project_access(db, outsider.id, project.id)
    assert found.id == project.id


async def test_task_grant_does_not_open_other_projects(db, owner, outsider, project, task):
    other_project = await ProjectService.create_project(db, "second", None, owner.id)
    await TaskService.grant_task_access(db, task.id, owner.id, outsider.id)
    with pytest.raises(ServiceError):
        await validate_user_project_access(db, outsider.id, other_project.id)


class BrokenSession:
    """Stands in for a session whose connection has dropped."""

    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection lost"))


async def test_store_failure_is_not_permission_denied():
    with pytest.raises(OperationalError):
        await validate_task_ownership(BrokenSession(), 1, 1)
    with pytest.raises(OperationalError):
        await validate_user_project_access(BrokenSession(), 1, 1)
