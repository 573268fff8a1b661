"""SQLAlchemy ORM model for the users table."""

from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text

from .base import Base


class UserModel(Base):
    """SQLAlchemy ORM model for users table."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    display_name = Column(String(255), nullable=True)
    photo_url = Column(Text, nullable=True)
    role = Column(String(20), nullable=True)
    status = Column(String(20), nullable=False, default="pending")
    suspend_reason = Column(Text, nullable=True)
    suspend_feedback = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
