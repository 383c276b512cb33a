"""
Grade Quiz Use Case

Grades a student's answers against a material's quiz and records the
score as the material's progress.
"""

import logging
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.quiz import QuizFormatError, grade_quiz, normalize_questions
from .dtos import GradeQuizCommand, GradeQuizResponse

logger = logging.getLogger(__name__)


class GradeQuizUseCase:
    """
    Use case for grading a quiz.

    Business Rules:
    - Only the owner of a material can grade its quiz
    - Stored questions are normalized from either legacy shape first
    - Score is a whole percentage; a material without questions scores 0
    - progress is set to the score, clamped to 0..100
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, material_id: UUID, command: GradeQuizCommand
    ) -> Result[GradeQuizResponse]:
        async with self.uow:
            material = await self.uow.course_materials.get_for_user(material_id, user_id)
            if material is None:
                return Return.err(Error("MATERIAL_NOT_FOUND", "Material not found"))

            try:
                questions = normalize_questions(material.quiz)
            except QuizFormatError as exc:
                logger.error(f"Stored quiz is malformed | material_id={material_id} error={exc}")
                return Return.err(
                    Error("INVALID_QUIZ", "Quiz data is malformed", {"question": exc.index})
                )

            grade = grade_quiz(questions, command.answers)

            material.progress = max(0, min(100, grade.score))
            material.updated_at = utcnow()
            await self.uow.course_materials.update(material)
            await self.uow.commit()

            return Return.ok(
                GradeQuizResponse(
                    score=grade.score, correct=grade.correct, progress=material.progress
                )
            )
