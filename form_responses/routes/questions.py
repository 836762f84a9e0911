"""Question edit route."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from form_responses.logic import question_service
from form_responses.models.question import QuestionUpdate

router = APIRouter()


@router.patch("/forms/{form_id}/questions/{question_id}", summary="Update a question")
def update_question(form_id: str, question_id: str, payload: QuestionUpdate):
    """Apply a partial update; type changes and option removals are refused once the form has responses."""
    question = question_service.update_question(form_id, question_id, payload)
    return JSONResponse(question.model_dump(mode="json"), status_code=200)


__all__ = ["router", "update_question"]
