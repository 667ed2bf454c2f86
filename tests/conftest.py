# tests/conftest.py

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["RATE_LIMIT_ENABLED"] = "false"

from datetime import timedelta

import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker

from taskboard.core.database import aget_db, create_engine_for, register_models
from taskboard.models.base import Base
from taskboard.models.user import User
from taskboard.services import ProjectService, TaskService
from taskboard.utils.clock import utcnow


def day(offset_days: int) -> str:
    """A DD-MM-YYYY string offset from today."""
    return (utcnow() + timedelta(days=offset_days)).strftime("%d-%m-%Y")


def minute(offset: timedelta, base=None) -> str:
    """A dd-mm-yyyy hh:mm string offset from base, or from now."""
    return ((base or utcnow()) + offset).strftime("%d-%m-%Y %H:%M")


@pytest.fixture()
async def engine():
    engine = create_engine_for("sqlite+aiosqlite:///:memory:")
    register_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@pytest.fixture()
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
def make_user(db):
    """
    Insert a user directly. Password hashing is exercised by the auth tests;
    service tests only need identities.
    """
    counter = {"n": 0}

    async def _make_user(name: str = None) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            name=name or f"user {n}",
            email=f"user{n}@example.com",
            password_hash="not-a-real-hash",
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    return _make_user


@pytest.fixture()
async def owner(make_user):
    return await make_user("owner")


@pytest.fixture()
async def outsider(make_user):
    return await make_user("outsider")


@pytest.fixture()
async def project(db, owner):
    return await ProjectService.create_project(db, "test project", "test project description", owner.id)


@pytest.fixture()
async def task(db, owner, project):
    return await TaskService.create_task(db, "test task", 100, project.id, owner.id, "task title", None)


@pytest.fixture()
async def client(session_factory):
    from taskboard.main import app

    async def override_aget_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[aget_db] = override_aget_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
