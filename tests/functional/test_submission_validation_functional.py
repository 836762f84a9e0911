"""Functional tests for whole-submission validation."""

from __future__ import annotations

from form_responses.logic.submission_validation import MESSAGE_NO_QUESTIONS, validate_submission
from form_responses.models.answer_value import MultiSelectValue, ScalarValue
from form_responses.models.question import Question
from form_responses.models.submission import IssueKind, RawAnswer


def _questions() -> list[Question]:
    return [
        Question(id="q1", title="Attending", type="multiple_choice", options=["Yes", "No"], is_required=True),
        Question(id="q2", title="Comments", type="short_answer"),
        Question(id="q3", title="Snacks", type="checkbox", options=["Chips", "Fruit"]),
    ]


def _answers(*pairs) -> list[RawAnswer]:
    return [RawAnswer(question_id=qid, value=value) for qid, value in pairs]


def test_missing_required_answer_is_reported():
    outcome = validate_submission(_questions(), _answers(("q2", "fine")))
    assert outcome.ok is False
    assert len(outcome.errors) == 1
    issue = outcome.errors[0]
    assert issue.kind == IssueKind.REQUIRED
    assert issue.question_id == "q1"
    assert "is required but no answer was provided" in issue.message


def test_duplicate_answer_for_question_is_structural():
    outcome = validate_submission(_questions(), _answers(("q1", "Yes"), ("q1", "No")))
    assert outcome.ok is False
    kinds = [e.kind for e in outcome.errors]
    assert kinds == [IssueKind.STRUCTURAL]
    assert "Duplicate answer for question 'Attending'" in outcome.errors[0].message
    assert outcome.errors[0].index == 1


def test_every_problem_is_collected_in_one_pass():
    outcome = validate_submission(
        _questions(),
        _answers(("zzz", "x"), ("q3", ["Chips", "Chips"]), (None, "orphan"), ("q2", 7)),
    )
    assert outcome.ok is False
    fields = [(e.kind, e.index) for e in outcome.errors]
    assert (IssueKind.STRUCTURAL, 0) in fields
    assert (IssueKind.VALUE, 1) in fields
    assert (IssueKind.STRUCTURAL, 2) in fields
    assert (IssueKind.VALUE, 3) in fields
    # q1 was never answered
    assert any(e.kind == IssueKind.REQUIRED and e.question_id == "q1" for e in outcome.errors)
    assert len(outcome.errors) == 5


def test_answer_for_question_outside_form_is_rejected():
    outcome = validate_submission(_questions(), _answers(("q1", "Yes"), ("other", "x")))
    assert outcome.ok is False
    assert outcome.errors[0].message == "Question 'other' does not belong to this form."


def test_required_empty_value_reported_once():
    outcome = validate_submission(_questions(), _answers(("q1", "  ")))
    assert [e.kind for e in outcome.errors] == [IssueKind.REQUIRED]
    assert outcome.errors[0].field == "value"


def test_success_keeps_input_order_and_skips_empty_optional_answers():
    outcome = validate_submission(
        _questions(),
        _answers(("q3", ["Fruit", "Chips"]), ("q2", ""), ("q1", "No")),
    )
    assert outcome.ok is True
    assert outcome.errors == []
    assert [a.question_id for a in outcome.normalized_answers] == ["q3", "q1"]
    assert outcome.normalized_answers[0].value == MultiSelectValue(selections=("Fruit", "Chips"))
    assert outcome.normalized_answers[1].value == ScalarValue(text="No")


def test_all_empty_optional_answers_are_kept_as_explicit_rows():
    optional_only = _questions()[1:]
    outcome = validate_submission(optional_only, _answers(("q2", "   "), ("q3", [])))
    assert outcome.ok is True
    assert [a.question_id for a in outcome.normalized_answers] == ["q2", "q3"]
    assert outcome.normalized_answers[0].value == ScalarValue(text="")
    assert outcome.normalized_answers[1].value == MultiSelectValue(selections=())


def test_form_without_questions_rejects_non_empty_submission():
    outcome = validate_submission([], _answers(("q1", "Yes")))
    assert outcome.ok is False
    assert outcome.errors[0].kind == IssueKind.DOMAIN_STATE
    assert outcome.errors[0].message == MESSAGE_NO_QUESTIONS


def test_form_without_questions_accepts_empty_submission():
    outcome = validate_submission([], [])
    assert outcome.ok is True
    assert outcome.normalized_answers == []


def test_configured_length_limit_applies():
    outcome = validate_submission(_questions(), _answers(("q1", "Yes"), ("q2", "abcdef")), max_length=5)
    assert outcome.ok is False
    assert outcome.errors[0].kind == IssueKind.VALUE
    assert "exceeds maximum length of 5" in outcome.errors[0].message
