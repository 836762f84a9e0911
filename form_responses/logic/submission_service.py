"""Submission and statistics services.

Composes the form state checks, the question schema provider, the pure
validators and aggregation, and the transactional response store into the
operations the HTTP layer calls. Form state problems and persistence
failures are raised as domain exceptions; per-answer problems come back as
a `ValidationErrorList` value.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Optional, Sequence

from form_responses.config import AppConfig, get_settings
from form_responses.logic import repository_forms, repository_questions, repository_responses
from form_responses.logic.aggregation import aggregate, breakdown, top_words
from form_responses.logic.csv_io import build_responses_csv
from form_responses.logic.errors import (
    DomainStateError,
    FormNotFoundError,
    QuestionNotFoundError,
    ResponseNotFoundError,
)
from form_responses.logic.events import RESPONSE_DELETED, RESPONSE_SUBMITTED, publish
from form_responses.logic.submission_validation import validate_submission
from form_responses.models.question import Form, QuestionType, TYPES_REQUIRING_OPTIONS
from form_responses.models.statistics import FormStatistics, QuestionStatisticsDetail, QuestionStats
from form_responses.models.submission import (
    Pagination,
    RawAnswer,
    Response,
    ResponsePage,
    ValidationErrorList,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100


def _require_form(form_id: str) -> Form:
    form = repository_forms.get_form(form_id)
    if form is None:
        raise FormNotFoundError(form_id)
    return form


def submit_response(
    form_id: str,
    respondent_id: Optional[str],
    raw_answers: Sequence[RawAnswer],
    *,
    config: Optional[AppConfig] = None,
) -> Response | ValidationErrorList:
    """Validate a submission against the form's live questions and store it.

    The form must exist and be published; both are checked before any
    answer is inspected. Returns the stored Response, or every validation
    problem found. Nothing is written unless validation passes completely.
    """
    cfg = config or get_settings()
    form = _require_form(form_id)
    if not form.accepts_submissions:
        logger.info("submission.rejected_form_state form_id=%s status=%s", form_id, form.status)
        raise DomainStateError(
            "This form is not accepting responses. The form must be published to accept submissions."
        )

    questions = repository_questions.get_questions_for_form(form_id)
    outcome = validate_submission(
        questions, raw_answers, max_length=cfg.submissions.short_answer_max_length
    )
    if not outcome.ok:
        logger.info("submission.rejected form_id=%s errors=%d", form_id, len(outcome.errors))
        return ValidationErrorList(errors=outcome.errors)

    response = repository_responses.create_with_answers(form_id, respondent_id, outcome.normalized_answers)
    logger.info(
        "submission.accepted form_id=%s response_id=%s answers=%d", form_id, response.id, len(response.answers)
    )
    publish(
        RESPONSE_SUBMITTED,
        {"form_id": form_id, "response_id": response.id, "answers_count": len(response.answers)},
    )
    return response


def compute_statistics(form_id: str, *, config: Optional[AppConfig] = None) -> Dict[str, QuestionStats]:
    """Aggregate every stored submission of a form over its current questions."""
    cfg = config or get_settings()
    _require_form(form_id)
    questions = repository_questions.get_questions_for_form(form_id)
    submissions = repository_responses.find_by_form_id(form_id)
    return aggregate(questions, submissions, min_word_length=cfg.analytics.min_word_length)


def form_statistics(form_id: str, *, config: Optional[AppConfig] = None) -> FormStatistics:
    cfg = config or get_settings()
    _require_form(form_id)
    questions = repository_questions.get_questions_for_form(form_id)
    submissions = repository_responses.find_by_form_id(form_id)
    stats = aggregate(questions, submissions, min_word_length=cfg.analytics.min_word_length)
    return FormStatistics(
        form_id=form_id,
        total_submissions=len(submissions),
        question_count=len(questions),
        questions=stats,
    )


def question_statistics(
    form_id: str, question_id: str, *, config: Optional[AppConfig] = None
) -> QuestionStatisticsDetail:
    cfg = config or get_settings()
    stats = compute_statistics(form_id, config=cfg)
    entry = stats.get(question_id)
    if entry is None:
        raise QuestionNotFoundError(question_id)
    detail = QuestionStatisticsDetail(form_id=form_id, question_id=question_id, statistics=entry)
    if entry.question.type in TYPES_REQUIRING_OPTIONS:
        detail.breakdown = breakdown(entry)
    elif entry.question.type == QuestionType.SHORT_ANSWER:
        detail.top_words = top_words(entry.word_frequency, cfg.analytics.top_words_limit)
    return detail


def normalize_pagination(page: Optional[int], limit: Optional[int], sort: Optional[str]) -> tuple[int, int, str]:
    """Clamp paging input: page >= 1, 1 <= limit <= 100, sort asc|desc (default desc)."""
    page_num = max(1, page if page is not None else 1)
    limit_num = min(MAX_PAGE_LIMIT, max(1, limit if limit is not None else DEFAULT_PAGE_LIMIT))
    sort_order = (sort or "").strip().lower()
    if sort_order not in {"asc", "desc"}:
        sort_order = "desc"
    return page_num, limit_num, sort_order


def list_responses(
    form_id: str, *, page: Optional[int] = None, limit: Optional[int] = None, sort: Optional[str] = None
) -> ResponsePage:
    _require_form(form_id)
    page_num, limit_num, sort_order = normalize_pagination(page, limit, sort)
    responses, total = repository_responses.list_page(form_id, page=page_num, limit=limit_num, sort=sort_order)
    total_pages = math.ceil(total / limit_num) if total else 0
    return ResponsePage(
        responses=responses,
        pagination=Pagination(
            current_page=page_num,
            total_pages=total_pages,
            total_items=total,
            items_per_page=limit_num,
            has_next_page=page_num < total_pages,
            has_prev_page=page_num > 1,
        ),
    )


def get_response(form_id: str, response_id: str) -> Response:
    _require_form(form_id)
    response = repository_responses.find_by_id(response_id)
    if response is None or response.form_id != form_id:
        raise ResponseNotFoundError(response_id)
    return response


def delete_response(form_id: str, response_id: str) -> None:
    get_response(form_id, response_id)
    if not repository_responses.delete_response(response_id):
        raise ResponseNotFoundError(response_id)
    publish(RESPONSE_DELETED, {"form_id": form_id, "response_id": response_id})


def export_responses_csv(form_id: str, *, config: Optional[AppConfig] = None) -> bytes:
    cfg = config or get_settings()
    _require_form(form_id)
    questions = repository_questions.get_questions_for_form(form_id)
    responses = repository_responses.find_by_form_id(form_id)
    return build_responses_csv(questions, responses, include_header=cfg.export.include_header)


__all__ = [
    "submit_response",
    "compute_statistics",
    "form_statistics",
    "question_statistics",
    "normalize_pagination",
    "list_responses",
    "get_response",
    "delete_response",
    "export_responses_csv",
]
