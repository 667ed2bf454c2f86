"""Meeting agenda rules. Every mutation re-checks the dates against the current time."""

import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.errors import ErrorKind, ServiceError
from taskboard.models.meeting import Meeting
from taskboard.utils.clock import utcnow
from taskboard.utils.date_validation import validate_meeting_dates

logger = logging.getLogger(__name__)


def _meeting_not_found() -> ServiceError:
    return ServiceError(ErrorKind.not_found, "Meeting not found")


async def create_meeting(
    db: AsyncSession,
    user_id: int,
    start_date: datetime,
    end_date: datetime,
) -> Meeting:
    validate_meeting_dates(start_date, end_date)

    now = utcnow()
    meeting = Meeting(
        user_id=user_id,
        start_date=start_date,
        end_date=end_date,
        created_at=now,
        updated_at=now,
    )
    db.add(meeting)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(meeting)

    logger.info(f"User {user_id} scheduled meeting {meeting.id}")
    return meeting


async def get_meetings_by_user(db: AsyncSession, user_id: int) -> List[Meeting]:
    result = await db.execute(
        select(Meeting)
        .where(Meeting.user_id == user_id)
        .order_by(Meeting.start_date.asc())
    )
    return list(result.scalars().all())


async def get_meeting_by_id(db: AsyncSession, meeting_id: int, user_id: int) -> Meeting:
    result = await db.execute(
        select(Meeting).where(
            and_(
                Meeting.id == meeting_id,
                Meeting.user_id == user_id,
            )
        )
    )
    meeting = result.scalar_one_or_none()
    if meeting is None:
        raise _meeting_not_found()
    return meeting


async def update_meeting(
    db: AsyncSession,
    meeting_id: int,
    user_id: int,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> Meeting:
    """
    Move a meeting. Missing dates keep their current value, and the
    resulting pair is validated as if it were new: a meeting whose start
    has already passed can no longer be edited.
    """
    meeting = await get_meeting_by_id(db, meeting_id, user_id)

    new_start = start_date if start_date is not None else meeting.start_date
    new_end = end_date if end_date is not None else meeting.end_date
    validate_meeting_dates(new_start, new_end)

    meeting.start_date = new_start
    meeting.end_date = new_end
    meeting.updated_at = utcnow()
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(meeting)

    logger.info(f"User {user_id} updated meeting {meeting_id}")
    return meeting


async def delete_meeting(db: AsyncSession, meeting_id: int, user_id: int) -> None:
    """Someone else's meeting is reported exactly like a missing one."""
    meeting = await db.get(Meeting, meeting_id)

    if meeting is None or meeting.user_id != user_id:
        logger.warning(f"User {user_id} could not delete meeting {meeting_id}")
        raise _meeting_not_found()

    try:
        await db.delete(meeting)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info(f"User {user_id} deleted meeting {meeting_id}")
