"""APIRouter registration for the Form Responses Service."""

from __future__ import annotations

from fastapi import APIRouter

from form_responses.routes.questions import router as questions_router
from form_responses.routes.responses import router as responses_router
from form_responses.routes.statistics import router as statistics_router

api_router = APIRouter()
api_router.include_router(responses_router, tags=["Responses"])
api_router.include_router(statistics_router, tags=["Statistics"])
api_router.include_router(questions_router, tags=["Questions"])

__all__ = ["api_router"]
