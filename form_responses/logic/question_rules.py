"""Rules governing question option sets and post-submission immutability.

Once a form has at least one submission its questions are frozen in the
parts stored answers depend on: the type cannot change and existing options
cannot be removed. New options may still be appended, and title, required
flag and ordering stay editable.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from form_responses.logic.errors import QuestionFrozenError, QuestionRuleError
from form_responses.models.question import Question, QuestionType, QuestionUpdate, requires_options


def validate_options_for_type(question_type: str, options: Optional[List[Any]]) -> List[str]:
    """Return the option list to store for `question_type`.

    Choice types need at least one option; each must be a non-empty string
    and options must be unique ignoring case and surrounding whitespace.
    Short answers never carry options, so any provided are dropped.
    """
    if question_type not in QuestionType.ALL:
        raise QuestionRuleError(
            f"Type must be one of: {', '.join(QuestionType.ALL)}"
        )
    if not requires_options(question_type):
        return []
    if not options:
        raise QuestionRuleError(
            f"Question type '{question_type}' requires at least one option. Please provide an options array."
        )
    for index, option in enumerate(options):
        if not isinstance(option, str) or option.strip() == "":
            raise QuestionRuleError(f"Option at index {index} must be a non-empty string.")
    folded = {option.strip().lower() for option in options}
    if len(folded) != len(options):
        raise QuestionRuleError("Options must be unique (no duplicates allowed).")
    return list(options)


def check_question_update(
    existing: Question, updates: QuestionUpdate, *, has_submissions: bool
) -> Dict[str, Any]:
    """Validate a partial update and return the column changes to apply."""
    changes: Dict[str, Any] = {}

    if has_submissions:
        if updates.type is not None and updates.type != existing.type:
            raise QuestionFrozenError(
                "Cannot change question type because this form already has submissions."
            )
        if updates.options is not None and requires_options(existing.type):
            removed = [opt for opt in existing.options if opt not in updates.options]
            if removed:
                raise QuestionFrozenError(
                    "Cannot remove existing options because this form already has submissions. "
                    "You can only add new options. Removed options: " + ", ".join(removed)
                )

    final_type = updates.type if updates.type is not None else existing.type
    final_options = updates.options if updates.options is not None else existing.options
    if updates.type is not None or updates.options is not None:
        changes["type"] = final_type
        changes["options"] = validate_options_for_type(final_type, final_options)

    if updates.title is not None:
        title = updates.title.strip()
        if not title:
            raise QuestionRuleError("Question title cannot be empty.")
        changes["title"] = title
    if updates.is_required is not None:
        changes["is_required"] = updates.is_required
    if updates.order_index is not None:
        changes["order_index"] = updates.order_index
    return changes


__all__ = ["validate_options_for_type", "check_question_update"]
