"""
CourseMaterial Entity

Study material uploaded by a student, optionally with a generated quiz.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class CourseMaterial(SQLModel, table=True):
    """
    CourseMaterial entity - a student's learning material.

    Business Rules:
    - Owned by exactly one user; only the owner may read or grade it
    - quiz holds raw question records in either the free-form
      ({"q", "a"}) or multiple-choice ({"question", "options",
      "correctIndex"}) shape
    - progress is the last quiz score, clamped to 0..100
    """

    __tablename__ = "course_materials"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id")

    title: str = Field(max_length=255)
    quiz: Optional[list] = Field(default=None, sa_column=Column(JSON))
    progress: int = Field(default=0)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_course_material_user_id", "user_id"),)
