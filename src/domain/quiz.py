"""
Quiz normalization and grading.

Stored quizzes come in two legacy shapes:

- free-form: ``{"q": "prompt", "a": "optional expected answer"}``
- multiple-choice: ``{"question": "prompt", "options": [4 strings],
  "correctIndex": 0..3}``

Both are normalized once, at the boundary, into the ``Question`` sum type.
"""

import math
from typing import Annotated, Any, Iterable, List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

MCQ_OPTION_COUNT = 4


class QuizFormatError(ValueError):
    """Raised when a stored question record matches neither legacy shape."""

    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(f"Question {index}: {reason}")


class McqQuestion(BaseModel):
    kind: Literal["mcq"] = "mcq"
    prompt: str
    options: List[str]
    correct_index: int

    @field_validator("options")
    @classmethod
    def _four_options(cls, options: List[str]) -> List[str]:
        if len(options) != MCQ_OPTION_COUNT:
            raise ValueError(f"expected {MCQ_OPTION_COUNT} options, got {len(options)}")
        return options

    @model_validator(mode="after")
    def _index_in_range(self) -> "McqQuestion":
        if not 0 <= self.correct_index < len(self.options):
            raise ValueError(f"correct_index {self.correct_index} out of range")
        return self

    def is_correct(self, answer: Any) -> bool:
        return _parse_index(answer) == self.correct_index


class FreeFormQuestion(BaseModel):
    kind: Literal["free_form"] = "free_form"
    prompt: str
    expected_answer: Optional[str] = None

    def is_correct(self, answer: Any) -> bool:
        given = _normalize_text(answer)
        expected = _normalize_text(self.expected_answer)
        if expected:
            return given == expected or expected in given
        # No recorded answer: any non-empty attempt counts
        return len(given) > 0


Question = Annotated[Union[McqQuestion, FreeFormQuestion], Field(discriminator="kind")]


class QuizGrade(BaseModel):
    score: int
    correct: List[bool]


def _normalize_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip().lower()


def _parse_index(answer: Any) -> Optional[int]:
    if isinstance(answer, bool):
        return None
    if isinstance(answer, int):
        return answer
    try:
        return int(str(answer).strip())
    except (TypeError, ValueError):
        return None


def normalize_question(record: Any, index: int = 0) -> Union[McqQuestion, FreeFormQuestion]:
    """Convert one raw record (or an already-tagged one) into a Question."""
    if isinstance(record, (McqQuestion, FreeFormQuestion)):
        return record
    if not isinstance(record, dict):
        raise QuizFormatError(index, "record must be an object")

    try:
        if record.get("kind") == "mcq" or "options" in record:
            return McqQuestion(
                prompt=record.get("question", record.get("prompt", "")),
                options=record.get("options") or [],
                correct_index=record.get("correctIndex", record.get("correct_index")),
            )
        if record.get("kind") == "free_form" or "q" in record or "prompt" in record:
            return FreeFormQuestion(
                prompt=record.get("q", record.get("prompt", "")),
                expected_answer=record.get("a", record.get("expected_answer")),
            )
    except ValidationError as exc:
        raise QuizFormatError(index, exc.errors()[0]["msg"]) from exc

    raise QuizFormatError(index, "unrecognized question shape")


def normalize_questions(records: Optional[Iterable[Any]]) -> List[Union[McqQuestion, FreeFormQuestion]]:
    if not records:
        return []
    return [normalize_question(record, idx) for idx, record in enumerate(records)]


def grade_quiz(
    questions: Sequence[Union[McqQuestion, FreeFormQuestion]],
    answers: Sequence[Any],
) -> QuizGrade:
    """
    Grade answers positionally against questions.

    Missing answers count as empty. An empty quiz scores 0.
    """
    correct = [
        question.is_correct(answers[idx] if idx < len(answers) else "")
        for idx, question in enumerate(questions)
    ]
    if not questions:
        return QuizGrade(score=0, correct=[])
    # Half-up rounding, so 12.5 -> 13
    score = math.floor(100 * sum(correct) / len(questions) + 0.5)
    return QuizGrade(score=score, correct=correct)
