"""Problem+JSON utilities and global exception handlers.

Defines the RFC7807 media type and the handler callables that turn
HTTPException, request validation failures, domain exceptions and unexpected
errors into application/problem+json responses.
"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from form_responses.logic.errors import FormsDomainError
from form_responses.logic.problem_factory import (
    problem_from_domain_error,
    problem_internal_error,
    problem_request_invalid,
)

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    status_code = int(getattr(exc, "status_code", 500) or 500)
    if isinstance(exc.detail, dict):
        detail = exc.detail
    else:
        detail = {"title": "Error", "status": status_code, "detail": str(exc.detail or "")}
    headers = dict(exc.headers) if isinstance(getattr(exc, "headers", None), dict) else None
    return JSONResponse(detail, status_code=status_code, media_type=PROBLEM_MEDIA_TYPE, headers=headers)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    problem = problem_request_invalid(jsonable_encoder(exc.errors()))
    return JSONResponse(problem, status_code=422, media_type=PROBLEM_MEDIA_TYPE)


async def handle_domain_error(request: Request, exc: FormsDomainError) -> JSONResponse:  # noqa: D401
    if exc.status >= 500:
        logger.error("domain_error path=%s code=%s", request.url.path, exc.code, exc_info=exc)
    return JSONResponse(problem_from_domain_error(exc), status_code=exc.status, media_type=PROBLEM_MEDIA_TYPE)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return JSONResponse(problem_internal_error(), status_code=500, media_type=PROBLEM_MEDIA_TYPE)


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_domain_error",
    "handle_unexpected_error",
]
