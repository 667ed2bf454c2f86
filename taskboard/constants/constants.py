"""Constants for task progress, task priorities and accepted date formats."""

from enum import Enum


class Progress(str, Enum):
    """Lifecycle of a task or subtask."""

    ToDo = "ToDo"
    InProgress = "InProgress"
    Completed = "Completed"


class Priority(str, Enum):
    """Urgency of a task or subtask."""

    Low = "Low"
    Medium = "Medium"
    High = "High"


# Tasks and subtasks receive a calendar day; the time of day is fixed to midnight.
TASK_DATE_FORMAT = "%d-%m-%Y %H:%M:%S"
TASK_DATE_DEFAULT_TIME = "00:00:00"
TASK_DATE_HINT = "DD-MM-YYYY"

# Meetings are scheduled to the minute.
MEETING_DATE_FORMAT = "%d-%m-%Y %H:%M"
MEETING_DATE_HINT = "dd-mm-yyyy hh:mm"

# Query-string spelling accepted by the "my work" view.
PROGRESS_FILTERS = {
    "to_do": Progress.ToDo,
    "in_progress": Progress.InProgress,
    "completed": Progress.Completed,
}
