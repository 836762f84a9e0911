"""Type-aware validation and normalization of a single answer.

`validate_answer` is pure: it looks only at the question definition and the
raw value, performs no I/O and never raises for bad input. Normalization is a
fixed point, so validating an already-normalized value yields it unchanged.
"""

from __future__ import annotations

from typing import Any, Callable, Dict

from form_responses.models.answer_value import MultiSelectValue, ScalarValue, empty_value_for
from form_responses.models.question import Question, QuestionType
from form_responses.models.submission import AnswerOutcome


SHORT_ANSWER_MAX_LENGTH = 5000

REASON_REQUIRED = "required"
REASON_UNKNOWN_TYPE = "unknown type"
REASON_WRONG_SHAPE = "wrong type"
REASON_TOO_LONG = "too long"
REASON_NOT_IN_OPTIONS = "not in options"
REASON_DUPLICATE_SELECTION = "duplicate selection"


def is_empty_value(raw: Any) -> bool:
    """None, blank strings and empty lists all count as "no value"."""
    if raw is None:
        return True
    if isinstance(raw, str):
        return raw.strip() == ""
    if isinstance(raw, (list, tuple)):
        return len(raw) == 0
    return False


def _fail(reason: str, message: str) -> AnswerOutcome:
    return AnswerOutcome(ok=False, reason=reason, message=message)


def _ok(value: ScalarValue | MultiSelectValue) -> AnswerOutcome:
    return AnswerOutcome(ok=True, normalized=value)


def _validate_short_answer(question: Question, raw: Any, max_length: int) -> AnswerOutcome:
    if not isinstance(raw, str):
        return _fail(REASON_WRONG_SHAPE, f"Answer for '{question.title}' must be a text string.")
    if len(raw) > max_length:
        return _fail(
            REASON_TOO_LONG,
            f"Answer for '{question.title}' exceeds maximum length of {max_length} characters.",
        )
    return _ok(ScalarValue(text=raw.strip()))


def _validate_single_choice(question: Question, raw: Any, max_length: int) -> AnswerOutcome:
    if not isinstance(raw, str):
        return _fail(REASON_WRONG_SHAPE, f"Answer for '{question.title}' must be a single text value.")
    if raw not in question.options:
        return _fail(
            REASON_NOT_IN_OPTIONS,
            f"'{raw}' not in options for question '{question.title}'. "
            f"Valid options: {', '.join(question.options)}",
        )
    return _ok(ScalarValue(text=raw))


def _validate_checkbox(question: Question, raw: Any, max_length: int) -> AnswerOutcome:
    if not isinstance(raw, (list, tuple)):
        return _fail(
            REASON_WRONG_SHAPE, f"Answer for '{question.title}' must be an array of selected options."
        )
    seen: set[str] = set()
    for selected in raw:
        if not isinstance(selected, str):
            return _fail(
                REASON_WRONG_SHAPE, f"All selected options for '{question.title}' must be text strings."
            )
        if selected not in question.options:
            return _fail(
                REASON_NOT_IN_OPTIONS,
                f"'{selected}' not in options for question '{question.title}'. "
                f"Valid options: {', '.join(question.options)}",
            )
        if selected in seen:
            return _fail(
                REASON_DUPLICATE_SELECTION,
                f"Option '{selected}' is selected more than once for question '{question.title}'.",
            )
        seen.add(selected)
    return _ok(MultiSelectValue(selections=tuple(raw)))


_VALIDATORS: Dict[str, Callable[[Question, Any, int], AnswerOutcome]] = {
    QuestionType.SHORT_ANSWER: _validate_short_answer,
    QuestionType.MULTIPLE_CHOICE: _validate_single_choice,
    QuestionType.DROPDOWN: _validate_single_choice,
    QuestionType.CHECKBOX: _validate_checkbox,
}


def validate_answer(
    question: Question, raw_value: Any, *, max_length: int = SHORT_ANSWER_MAX_LENGTH
) -> AnswerOutcome:
    """Validate one raw value against its question.

    Returns `AnswerOutcome(ok=True, normalized=...)` or
    `AnswerOutcome(ok=False, reason=..., message=...)`. An empty value on an
    optional question succeeds with the type's empty normalized value; the
    caller decides whether that is persisted.
    """
    validator = _VALIDATORS.get(question.type)
    if validator is None:
        return _fail(REASON_UNKNOWN_TYPE, f"Question '{question.title}' has unknown type '{question.type}'.")

    if is_empty_value(raw_value):
        if question.is_required:
            return _fail(REASON_REQUIRED, f"Answer is required for question '{question.title}'.")
        return _ok(empty_value_for(question.type))

    return validator(question, raw_value, max_length)


__all__ = [
    "SHORT_ANSWER_MAX_LENGTH",
    "REASON_REQUIRED",
    "REASON_UNKNOWN_TYPE",
    "REASON_WRONG_SHAPE",
    "REASON_TOO_LONG",
    "REASON_NOT_IN_OPTIONS",
    "REASON_DUPLICATE_SELECTION",
    "is_empty_value",
    "validate_answer",
]
