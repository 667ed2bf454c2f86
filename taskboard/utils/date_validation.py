"""Parsing and temporal rules for task, subtask and meeting dates.

Tasks and subtasks take a calendar day (``DD-MM-YYYY``) that is pinned to
midnight; meetings take a day and a time (``DD-MM-YYYY HH:MM``). The two
formats are kept separate on purpose: a meeting string is not a valid due
date and vice versa.
"""

from datetime import datetime
from typing import Optional

from taskboard.constants.constants import (
    MEETING_DATE_FORMAT,
    MEETING_DATE_HINT,
    TASK_DATE_DEFAULT_TIME,
    TASK_DATE_FORMAT,
    TASK_DATE_HINT,
)
from taskboard.core.errors import ErrorKind, ServiceError
from taskboard.utils.clock import utcnow


def parse_task_date(date_str: str) -> datetime:
    """Parse ``DD-MM-YYYY`` into a datetime at 00:00:00."""
    try:
        return datetime.strptime(f"{date_str} {TASK_DATE_DEFAULT_TIME}", TASK_DATE_FORMAT)
    except (TypeError, ValueError):
        raise ServiceError(
            ErrorKind.invalid_format,
            f"Invalid date format for '{date_str}'. Use '{TASK_DATE_HINT}'.",
        )


def parse_and_validate_created_at(
    created_at: Optional[str], now: Optional[datetime] = None
) -> datetime:
    """
    Resolve a creation date.

    Args:
        created_at (Optional[str]): ``DD-MM-YYYY`` or None for "now".
        now (Optional[datetime]): Reference time, defaults to the current UTC time.

    Returns:
        datetime: The parsed day at midnight, or ``now`` when absent.

    Raises:
        ServiceError: InvalidFormat when unparsable, FutureCreationDate when
            strictly after ``now``.
    """
    now = now or utcnow()
    if created_at is None:
        return now

    parsed_date = parse_task_date(created_at)
    if parsed_date > now:
        raise ServiceError(
            ErrorKind.future_creation_date,
            f"The created_at date '{created_at}' cannot be in the future.",
        )
    return parsed_date


def parse_and_validate_due_date(
    due_date: Optional[str], now: Optional[datetime] = None
) -> Optional[datetime]:
    """
    Resolve an optional due date.

    Returns None when no due date was given. Raises InvalidFormat when the
    string does not parse and PastDueDate when it lies strictly before ``now``.
    """
    if due_date is None:
        return None

    now = now or utcnow()
    parsed_date = parse_task_date(due_date)
    if parsed_date < now:
        raise ServiceError(
            ErrorKind.past_due_date,
            f"The due_date '{due_date}' cannot be in the past.",
        )
    return parsed_date


def parse_meeting_datetime(date_str: str) -> datetime:
    """Parse ``DD-MM-YYYY HH:MM``."""
    try:
        return datetime.strptime(date_str, MEETING_DATE_FORMAT)
    except (TypeError, ValueError):
        raise ServiceError(
            ErrorKind.invalid_format,
            f"Invalid date format for '{date_str}'. Expected format: '{MEETING_DATE_HINT}'",
        )


def validate_meeting_dates(
    start_date: datetime, end_date: datetime, now: Optional[datetime] = None
) -> None:
    """Check start, then end, then the range. Only the first failure is reported."""
    now = now or utcnow()

    if start_date < now:
        raise ServiceError(ErrorKind.invalid_start_date, "Start date cannot be in the past")

    if end_date < now:
        raise ServiceError(ErrorKind.invalid_end_date, "End date cannot be in the past")

    if end_date <= start_date:
        raise ServiceError(ErrorKind.invalid_date_range, "End date must be after start date")
