from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class ProjectResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    user_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class ProjectCreateRequest(BaseModel):
    """Request schema for creating a new project."""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
