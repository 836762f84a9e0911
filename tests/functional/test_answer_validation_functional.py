"""Functional tests for single-answer validation and normalization."""

from __future__ import annotations

import pytest

from form_responses.logic.answer_validation import (
    REASON_DUPLICATE_SELECTION,
    REASON_NOT_IN_OPTIONS,
    REASON_REQUIRED,
    REASON_TOO_LONG,
    REASON_UNKNOWN_TYPE,
    REASON_WRONG_SHAPE,
    is_empty_value,
    validate_answer,
)
from form_responses.models.answer_value import MultiSelectValue, ScalarValue
from form_responses.models.question import Question


def _q(type: str, options=None, required: bool = False, title: str = "Q") -> Question:
    return Question(id="q1", title=title, type=type, options=options or [], is_required=required)


def test_value_outside_options_is_rejected():
    question = _q("multiple_choice", ["Yes", "No"], required=True, title="Attending")
    outcome = validate_answer(question, "Maybe")
    assert outcome.ok is False
    assert outcome.reason == REASON_NOT_IN_OPTIONS
    assert "'Maybe' not in options" in outcome.message
    assert "Yes, No" in outcome.message


def test_checkbox_duplicate_selection_is_rejected():
    question = _q("checkbox", ["A", "B", "C"])
    outcome = validate_answer(question, ["A", "A"])
    assert outcome.ok is False
    assert outcome.reason == REASON_DUPLICATE_SELECTION
    assert "'A'" in outcome.message


def test_checkbox_unknown_member_checked_before_duplicates():
    question = _q("checkbox", ["A", "B", "C"])
    outcome = validate_answer(question, ["Z", "Z"])
    assert outcome.reason == REASON_NOT_IN_OPTIONS


@pytest.mark.parametrize("raw", [None, "", "   ", []])
def test_empty_value_on_required_question_fails_required(raw):
    outcome = validate_answer(_q("short_answer", required=True), raw)
    assert outcome.ok is False
    assert outcome.reason == REASON_REQUIRED


def test_empty_value_on_optional_question_normalizes_to_empty_variant():
    assert validate_answer(_q("short_answer"), None).normalized == ScalarValue(text="")
    assert validate_answer(_q("checkbox", ["A"]), []).normalized == MultiSelectValue()
    assert validate_answer(_q("dropdown", ["S"]), "  ").normalized == ScalarValue(text="")


def test_short_answer_is_trimmed_and_length_checked_against_limit():
    question = _q("short_answer")
    assert validate_answer(question, "  hello  ").normalized == ScalarValue(text="hello")

    too_long = validate_answer(question, "x" * 11, max_length=10)
    assert too_long.ok is False
    assert too_long.reason == REASON_TOO_LONG
    assert validate_answer(question, "x" * 10, max_length=10).ok is True


def test_wrong_shapes_are_rejected_per_type():
    assert validate_answer(_q("short_answer"), 42).reason == REASON_WRONG_SHAPE
    assert validate_answer(_q("multiple_choice", ["A"]), ["A"]).reason == REASON_WRONG_SHAPE
    assert validate_answer(_q("checkbox", ["A"]), "A").reason == REASON_WRONG_SHAPE
    assert validate_answer(_q("checkbox", ["A"]), ["A", 1]).reason == REASON_WRONG_SHAPE


def test_unknown_question_type_is_rejected_even_when_empty():
    outcome = validate_answer(_q("rating"), None)
    assert outcome.ok is False
    assert outcome.reason == REASON_UNKNOWN_TYPE


def test_choice_matching_is_exact_and_case_sensitive():
    question = _q("dropdown", ["Small", "Large"])
    assert validate_answer(question, "small").reason == REASON_NOT_IN_OPTIONS
    assert validate_answer(question, "Small").normalized == ScalarValue(text="Small")


def test_checkbox_keeps_selection_order():
    outcome = validate_answer(_q("checkbox", ["A", "B", "C"]), ["C", "A"])
    assert outcome.normalized == MultiSelectValue(selections=("C", "A"))


def test_revalidating_a_normalized_value_is_stable():
    short = _q("short_answer")
    first = validate_answer(short, "  padded ")
    again = validate_answer(short, first.normalized.to_json())
    assert again.normalized == first.normalized

    boxes = _q("checkbox", ["A", "B"])
    first_boxes = validate_answer(boxes, ["B", "A"])
    assert validate_answer(boxes, first_boxes.normalized.to_json()).normalized == first_boxes.normalized


def test_is_empty_value_treats_zero_and_false_as_values():
    assert is_empty_value(0) is False
    assert is_empty_value(False) is False
    assert is_empty_value("\t\n") is True
