"""Meeting agenda router. Dates use dd-mm-yyyy hh:mm."""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.database import aget_db
from taskboard.core.security import get_current_user
from taskboard.models.user import User
from taskboard.schemas.meetingSchema import (
    MeetingCreateRequest,
    MeetingResponse,
    MeetingUpdateRequest,
)
from taskboard.services import MeetingService
from taskboard.utils.date_validation import parse_meeting_datetime

router = APIRouter(
    prefix="/meetings",
    tags=["meetings"]
)


@router.post("", response_model=MeetingResponse, status_code=status.HTTP_201_CREATED)
async def create_meeting(
    meeting: MeetingCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    return await MeetingService.create_meeting(
        db,
        current_user.id,
        parse_meeting_datetime(meeting.start_date),
        parse_meeting_datetime(meeting.end_date),
    )


@router.get("", response_model=List[MeetingResponse])
async def get_meetings(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    return await MeetingService.get_meetings_by_user(db, current_user.id)


@router.get("/{meeting_id}", response_model=MeetingResponse)
async def get_meeting_by_id(
    meeting_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    return await MeetingService.get_meeting_by_id(db, meeting_id, current_user.id)


@router.patch("/{meeting_id}", response_model=MeetingResponse)
async def update_meeting(
    meeting_id: int,
    meeting_update: MeetingUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    start_date = (
        parse_meeting_datetime(meeting_update.start_date)
        if meeting_update.start_date is not None else None
    )
    end_date = (
        parse_meeting_datetime(meeting_update.end_date)
        if meeting_update.end_date is not None else None
    )
    return await MeetingService.update_meeting(
        db, meeting_id, current_user.id, start_date, end_date
    )


@router.delete("/{meeting_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meeting(
    meeting_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    await MeetingService.delete_meeting(db, meeting_id, current_user.id)
