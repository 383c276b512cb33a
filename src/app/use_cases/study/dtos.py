"""
Study Use Case DTOs
"""

from typing import Any, List

from pydantic import BaseModel


class GradeQuizCommand(BaseModel):
    """Answers submitted for a material's quiz, in question order"""

    answers: List[Any]


class GradeQuizResponse(BaseModel):
    """Response for quiz grading use case"""

    score: int
    correct: List[bool]
    progress: int
