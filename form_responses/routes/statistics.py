"""Routes exposing aggregated answer statistics."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from form_responses.logic import submission_service

router = APIRouter()


@router.get("/forms/{form_id}/statistics", summary="Aggregate statistics for every question")
def get_form_statistics(form_id: str):
    stats = submission_service.form_statistics(form_id)
    return JSONResponse(stats.model_dump(mode="json"), status_code=200)


@router.get(
    "/forms/{form_id}/questions/{question_id}/statistics",
    summary="Statistics for one question with breakdown or top words",
)
def get_question_statistics(form_id: str, question_id: str):
    detail = submission_service.question_statistics(form_id, question_id)
    return JSONResponse(detail.model_dump(mode="json"), status_code=200)


__all__ = ["router", "get_form_statistics", "get_question_statistics"]
