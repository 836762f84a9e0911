"""Whole-submission validation against a form's question list.

Runs the structural checks (unknown question, duplicate answer, missing
question id), the per-answer validator and the required-question coverage
check. Every problem is collected before returning so one attempt reports all
of them; only an empty question list short-circuits.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from form_responses.logic.answer_validation import (
    REASON_REQUIRED,
    SHORT_ANSWER_MAX_LENGTH,
    validate_answer,
)
from form_responses.models.question import Question
from form_responses.models.submission import (
    IssueKind,
    NormalizedAnswer,
    RawAnswer,
    SubmissionIssue,
    SubmissionOutcome,
)

logger = logging.getLogger(__name__)

MESSAGE_NO_QUESTIONS = "form has no questions, cannot accept submission"


def validate_submission(
    questions: Sequence[Question],
    raw_answers: Sequence[RawAnswer],
    *,
    max_length: int = SHORT_ANSWER_MAX_LENGTH,
) -> SubmissionOutcome:
    """Validate a full answer array for one form.

    On success `normalized_answers` lists, in input order, the answers to
    persist. Empty answers to optional questions are accepted but left out,
    unless every answer in a non-empty array is such an empty answer: those
    are then kept as explicit empty rows so a response is never stored
    without answers.
    """
    if raw_answers and not questions:
        return SubmissionOutcome(
            ok=False,
            errors=[SubmissionIssue(kind=IssueKind.DOMAIN_STATE, field="form", message=MESSAGE_NO_QUESTIONS)],
        )

    lookup: Dict[str, Question] = {q.id: q for q in questions}
    answered: set[str] = set()
    errors: List[SubmissionIssue] = []
    normalized: List[NormalizedAnswer] = []
    skipped_empty: List[NormalizedAnswer] = []

    for index, raw in enumerate(raw_answers):
        question_id = raw.question_id
        if not question_id:
            errors.append(
                SubmissionIssue(
                    kind=IssueKind.STRUCTURAL,
                    field="question_id",
                    index=index,
                    message="question_id is required for each answer.",
                )
            )
            continue

        question = lookup.get(question_id)
        if question is None:
            errors.append(
                SubmissionIssue(
                    kind=IssueKind.STRUCTURAL,
                    field="question_id",
                    index=index,
                    question_id=question_id,
                    message=f"Question '{question_id}' does not belong to this form.",
                )
            )
            continue

        if question_id in answered:
            errors.append(
                SubmissionIssue(
                    kind=IssueKind.STRUCTURAL,
                    field="question_id",
                    index=index,
                    question_id=question_id,
                    question_title=question.title,
                    message=f"Duplicate answer for question '{question.title}'. "
                    "Each question can only be answered once.",
                )
            )
            continue
        answered.add(question_id)

        outcome = validate_answer(question, raw.value, max_length=max_length)
        if not outcome.ok:
            errors.append(
                SubmissionIssue(
                    kind=IssueKind.REQUIRED if outcome.reason == REASON_REQUIRED else IssueKind.VALUE,
                    field="value",
                    index=index,
                    question_id=question_id,
                    question_title=question.title,
                    message=outcome.message or str(outcome.reason),
                )
            )
            continue

        value = outcome.normalized
        if value is None:
            continue
        if value.is_empty and not question.is_required:
            skipped_empty.append(NormalizedAnswer(question_id=question_id, value=value))
            continue
        normalized.append(NormalizedAnswer(question_id=question_id, value=value))

    for question in questions:
        if question.is_required and question.id not in answered:
            errors.append(
                SubmissionIssue(
                    kind=IssueKind.REQUIRED,
                    field="required",
                    question_id=question.id,
                    question_title=question.title,
                    message=f"Question '{question.title}' is required but no answer was provided.",
                )
            )

    if errors:
        logger.debug("submission_validation.failed errors=%d", len(errors))
        return SubmissionOutcome(ok=False, errors=errors)
    if not normalized:
        normalized = skipped_empty
    return SubmissionOutcome(ok=True, normalized_answers=normalized)


__all__ = ["MESSAGE_NO_QUESTIONS", "validate_submission"]
