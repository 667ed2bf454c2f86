# tests/test_meeting_service.py

from datetime import timedelta

import pytest

from taskboard.core.errors import ErrorKind, ServiceError
from taskboard.services import MeetingService
from taskboard.utils.clock import utcnow


def _slot(start_hours: float, length_minutes: int = 60):
    start = (utcnow() + timedelta(hours=start_hours)).replace(second=0, microsecond=0)
    return start, start + timedelta(minutes=length_minutes)


async def test_create_meeting(db, owner):
    start, end = _slot(24, 90)
    meeting = await MeetingService.create_meeting(db, owner.id, start, end)

    assert meeting.id is not None
    assert meeting.user_id == owner.id
    assert meeting.start_date == start
    assert meeting.end_date == end
    assert meeting.duration == 90
    assert meeting.created_at == meeting.updated_at


async def test_create_meeting_starting_in_the_past(db, owner):
    start, end = _slot(-1, 180)
    with pytest.raises(ServiceError) as exc_info:
        await MeetingService.create_meeting(db, owner.id, start, end)
    assert exc_info.value.kind == ErrorKind.invalid_start_date
    assert await MeetingService.get_meetings_by_user(db, owner.id) == []


async def test_create_meeting_ending_before_it_starts(db, owner):
    start, _ = _slot(48)
    with pytest.raises(ServiceError) as exc_info:
        await MeetingService.create_meeting(db, owner.id, start, start - timedelta(hours=1))
    assert exc_info.value.kind == ErrorKind.invalid_date_range


async def test_meetings_are_listed_by_start(db, owner, outsider):
    later = await MeetingService.create_meeting(db, owner.id, *_slot(72))
    sooner = await MeetingService.create_meeting(db, owner.id, *_slot(24))
    await MeetingService.create_meeting(db, outsider.id, *_slot(30))

    listed = await MeetingService.get_meetings_by_user(db, owner.id)
    assert [m.id for m in listed] == [sooner.id, later.id]


async def test_get_meeting_of_other_user_is_not_found(db, owner, outsider):
    meeting = await MeetingService.create_meeting(db, owner.id, *_slot(24))

    with pytest.raises(ServiceError) as exc_info:
        await MeetingService.get_meeting_by_id(db, meeting.id, outsider.id)
    assert exc_info.value.kind == ErrorKind.not_found


async def test_update_meeting_keeps_missing_dates(db, owner):
    start, end = _slot(24)
    meeting = await MeetingService.create_meeting(db, owner.id, start, end)

    new_end = end + timedelta(minutes=30)
    updated = await MeetingService.update_meeting(db, meeting.id, owner.id, end_date=new_end)

    assert updated.start_date == start
    assert updated.end_date == new_end
    assert updated.duration == 90


async def test_update_meeting_revalidates_the_resulting_pair(db, owner):
    start, end = _slot(24)
    meeting = await MeetingService.create_meeting(db, owner.id, start, end)

    # moving the start past the existing end breaks the range
    with pytest.raises(ServiceError) as exc_info:
        await MeetingService.update_meeting(
            db, meeting.id, owner.id, start_date=end + timedelta(hours=1)
        )
    assert exc_info.value.kind == ErrorKind.invalid_date_range

    with pytest.raises(ServiceError) as exc_info:
        await MeetingService.update_meeting(
            db, meeting.id, owner.id, start_date=utcnow() - timedelta(minutes=5)
        )
    assert exc_info.value.kind == ErrorKind.invalid_start_date


async def test_update_meeting_of_other_user_is_not_found(db, owner, outsider):
    meeting = await MeetingService.create_meeting(db, owner.id, *_slot(24))

    with pytest.raises(ServiceError) as exc_info:
        await MeetingService.update_meeting(db, meeting.id, outsider.id)
    assert exc_info.value.kind == ErrorKind.not_found


async def test_delete_meeting(db, owner):
    meeting = await MeetingService.create_meeting(db, owner.id, *_slot(24))
    meeting_id = meeting.id

    await MeetingService.delete_meeting(db, meeting_id, owner.id)

    with pytest.raises(ServiceError):
        await MeetingService.get_meeting_by_id(db, meeting_id, owner.id)


async def test_delete_meeting_of_other_user_is_not_found(db, owner, outsider):
    meeting = await MeetingService.create_meeting(db, owner.id, *_slot(24))

    with pytest.raises(ServiceError) as exc_info:
        await MeetingService.delete_meeting(db, meeting.id, outsider.id)
    assert exc_info.value.kind == ErrorKind.not_found
    assert exc_info.value.message == "Meeting not found"

    still_there = await MeetingService.get_meeting_by_id(db, meeting.id, owner.id)
    assert still_there.id == meeting.id


async def test_delete_missing_meeting_is_not_found(db, owner):
    with pytest.raises(ServiceError) as exc_info:
        await MeetingService.delete_meeting(db, 4040, owner.id)
    assert exc_info.value.kind == ErrorKind.not_found
