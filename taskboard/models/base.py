from sqlalchemy.orm import declarative_base
from sqlalchemy import Column, DateTime

from taskboard.utils.clock import utcnow

Base = declarative_base()


class TimestampMixin:
    """Mixin for timestamp columns"""
    __abstract__ = True
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

__all__ = ["Base", "TimestampMixin"]
