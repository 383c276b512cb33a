"""
User Entity

A StudIQ account that can request a password reset.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utcnow


class User(SQLModel, table=True):
    """
    User entity - a StudIQ account.

    Business Rules:
    - Email must be unique across all users (stored lower-case)
    - Password stored as bcrypt hash (cost factor 12)
    - password_changed_at is set whenever a reset is confirmed
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    password_changed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )
