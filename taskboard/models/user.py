"""User model for the Taskboard system."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from taskboard.models.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    # Relationships
    projects = relationship("Project", back_populates="owner", passive_deletes=True)
    meetings = relationship("Meeting", back_populates="user", passive_deletes=True)
