"""Centralised construction of problem+json payloads.

Route modules and exception handlers build error bodies here instead of
embedding titles, statuses and codes as literals.
"""

from __future__ import annotations

import logging
from typing import Dict, Sequence

from form_responses.logic.errors import FormsDomainError
from form_responses.models.submission import SubmissionIssue


logger = logging.getLogger(__name__)


def _problem(title: str, status: int, detail: str, code: str, **extra: object) -> Dict[str, object]:
    problem: Dict[str, object] = {
        "title": title,
        "status": status,
        "detail": detail,
        "code": code,
    }
    problem.update(extra)
    logger.info("error_handler.handle", extra={"code": code, "status": status})
    return problem


def problem_submission_invalid(errors: Sequence[SubmissionIssue]) -> Dict[str, object]:
    """Return a 400 problem listing every field-tagged submission issue."""
    return _problem(
        "Bad Request",
        400,
        "Validation failed for one or more answers.",
        "SUBMISSION_INVALID",
        errors=[e.model_dump(exclude_none=True) for e in errors],
    )


def problem_from_domain_error(exc: FormsDomainError) -> Dict[str, object]:
    """Map a domain exception to its problem body using the class metadata."""
    return _problem(exc.title, exc.status, exc.message, exc.code)


def problem_request_invalid(errors: list) -> Dict[str, object]:
    return _problem("Invalid Request", 422, "Request validation failed", "REQUEST_INVALID", errors=errors)


def problem_internal_error() -> Dict[str, object]:
    return _problem("Internal Server Error", 500, "An unexpected error occurred.", "INTERNAL_ERROR")


__all__ = [
    "problem_submission_invalid",
    "problem_from_domain_error",
    "problem_request_invalid",
    "problem_internal_error",
]
