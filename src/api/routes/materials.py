from typing import List, Union
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.study import GradeQuizCommand, GradeQuizResponse, GradeQuizUseCase
from src.depends import get_current_user, get_unit_of_work

router = APIRouter(prefix="/materials", tags=["Materials"])


class GradeQuizRequest(BaseModel):
    """
    Grade quiz HTTP request payload

    Answers in question order: option index for multiple-choice questions,
    free text otherwise.
    """

    answers: List[Union[int, str]] = Field(default_factory=list, description="Submitted answers")


@router.post(
    "/{material_id}/quiz/grade",
    status_code=status.HTTP_200_OK,
    response_model=GradeQuizResponse,
)
async def grade_quiz(
    material_id: UUID,
    request: GradeQuizRequest,
    user_id: UUID = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Grade Quiz

    Grades the submitted answers and stores the score as the material's
    progress.

    Raises:
        - 401 Unauthorized: Missing or invalid bearer token
        - 404 Not Found: MATERIAL_NOT_FOUND
        - 400 Bad Request: INVALID_QUIZ (stored quiz is malformed)
        - 500 Internal Server Error: Server error
    """
    use_case = GradeQuizUseCase(uow)
    result = await use_case.execute(user_id, material_id, GradeQuizCommand(answers=request.answers))

    if result.is_err():
        error = result.error
        if error.code == "MATERIAL_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "INVALID_QUIZ":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value
