"""
Study Use Cases
"""

from .grade_quiz_use_case import GradeQuizUseCase
from .dtos import GradeQuizCommand, GradeQuizResponse

__all__ = [
    "GradeQuizUseCase",
    "GradeQuizCommand",
    "GradeQuizResponse",
]
