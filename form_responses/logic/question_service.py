"""Question edit service.

Applies partial updates to a question while enforcing the option rules and
the post-submission freeze. The submission check and the UPDATE share one
transaction, and an edit to type or options made while the form looked
unanswered only lands if the form is still unanswered at write time.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from sqlalchemy.exc import SQLAlchemyError

from form_responses.db.base import transaction
from form_responses.logic import repository_forms, repository_questions
from form_responses.logic.errors import FormNotFoundError, PersistenceError, QuestionNotFoundError
from form_responses.logic.events import QUESTION_UPDATED, publish
from form_responses.logic.question_rules import check_question_update
from form_responses.models.question import Question, QuestionUpdate

logger = logging.getLogger(__name__)

_FROZEN_FIELDS = {"type", "options"}


def update_question(form_id: str, question_id: str, updates: QuestionUpdate) -> Question:
    if repository_forms.get_form(form_id) is None:
        raise FormNotFoundError(form_id)

    changes: Dict[str, Any] = {}
    try:
        with transaction() as conn:
            existing = repository_questions.get_question(form_id, question_id, conn, for_update=True)
            if existing is None:
                raise QuestionNotFoundError(question_id)

            submitted = repository_forms.has_submissions(form_id, conn)
            changes = check_question_update(existing, updates, has_submissions=submitted)
            if changes:
                guarded = not submitted and bool(_FROZEN_FIELDS & changes.keys())
                applied = repository_questions.update_question(
                    conn, question_id, changes, unless_submissions_for=form_id if guarded else None
                )
                if not applied:
                    # A first response landed after the check; the frozen rules now apply
                    changes = check_question_update(existing, updates, has_submissions=True)
                    repository_questions.update_question(conn, question_id, changes)
            updated = repository_questions.get_question(form_id, question_id, conn)
    except SQLAlchemyError as exc:
        logger.error("update_question failed form_id=%s question_id=%s", form_id, question_id, exc_info=True)
        raise PersistenceError("The question could not be updated.") from exc

    if changes:
        publish(QUESTION_UPDATED, {"form_id": form_id, "question_id": question_id, "fields": sorted(changes)})
    else:
        logger.info("question.update_noop form_id=%s question_id=%s", form_id, question_id)
    return updated if updated is not None else existing


__all__ = ["update_question"]
