from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class MeetingResponse(BaseModel):
    id: int
    user_id: int
    start_date: datetime
    end_date: datetime
    duration: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MeetingCreateRequest(BaseModel):
    """Request schema for scheduling a meeting. Dates use DD-MM-YYYY HH:MM."""
    start_date: str
    end_date: str


class MeetingUpdateRequest(BaseModel):
    """Request schema for moving a meeting. Missing dates keep their current value."""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
