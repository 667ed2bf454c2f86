"""Account registration and credential checks."""

import logging
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.errors import ErrorKind, ServiceError
from taskboard.core.security import hash_password, verify_password
from taskboard.models.user import User

logger = logging.getLogger(__name__)


async def get_user_by_email(db: AsyncSession, email: str):
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_id_by_email(db: AsyncSession, email: str) -> int:
    result = await db.execute(select(User.id).where(User.email == email))
    user_id = result.scalar_one_or_none()
    if user_id is None:
        raise ServiceError(ErrorKind.not_found, "User not found")
    return user_id


async def register_user(db: AsyncSession, name: str, password: str, email: str) -> User:
    """Create an account. A taken email is a Conflict."""
    email = email.strip().lower()
    if await get_user_by_email(db, email):
        raise ServiceError(ErrorKind.conflict, "An account with this email already exists")

    user = User(name=name, email=email, password_hash=hash_password(password))
    db.add(user)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(user)

    logger.info(f"Registered user {user.id}")
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User:
    """Return the user for a valid email/password pair."""
    user = await get_user_by_email(db, email.strip().lower())
    if not user or not verify_password(password, user.password_hash):
        raise ServiceError(ErrorKind.invalid_credentials, "Invalid email or password")
    return user
