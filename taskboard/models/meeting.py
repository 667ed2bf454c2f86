"""Meeting model for a user's agenda."""

from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from taskboard.models.base import Base, TimestampMixin


class Meeting(Base, TimestampMixin):
    """Model representing a meeting slot owned by one user."""

    __tablename__ = "meetings"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    user = relationship("User", back_populates="meetings")

    @property
    def duration(self) -> int:
        """Length of the meeting in minutes."""
        return int((self.end_date - self.start_date).total_seconds() // 60)
