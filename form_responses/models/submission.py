"""Pydantic models for submissions, stored responses and validation results."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from form_responses.models.answer_value import AnswerValue


class RawAnswer(BaseModel):
    """One answer exactly as the client sent it; `value` is not yet trusted."""

    question_id: Optional[str] = None
    value: Any = None


class SubmissionPayload(BaseModel):
    answers: List[RawAnswer] = Field(default_factory=list)


class NormalizedAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_id: str
    value: AnswerValue


class StoredAnswer(BaseModel):
    id: Optional[str] = None
    question_id: str
    question_title: Optional[str] = None
    question_type: Optional[str] = None
    value: AnswerValue


class Response(BaseModel):
    id: str
    form_id: str
    respondent_id: Optional[str] = None
    submitted_at: datetime
    answers: List[StoredAnswer] = Field(default_factory=list)


class SubmissionReceipt(BaseModel):
    id: str
    form_id: str
    submitted_at: datetime
    answers_count: int
    message: str = "Response submitted successfully."


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool


class ResponsePage(BaseModel):
    responses: List[Response]
    pagination: Pagination


class IssueKind:
    STRUCTURAL = "structural"
    VALUE = "value"
    REQUIRED = "required"
    DOMAIN_STATE = "domain_state"


class SubmissionIssue(BaseModel):
    """One problem found in a submission, tagged so a client can highlight the field."""

    kind: str
    field: str
    message: str
    index: Optional[int] = None
    question_id: Optional[str] = None
    question_title: Optional[str] = None


class ValidationErrorList(BaseModel):
    errors: List[SubmissionIssue]


class AnswerOutcome(BaseModel):
    ok: bool
    normalized: Optional[AnswerValue] = None
    reason: Optional[str] = None
    message: Optional[str] = None


class SubmissionOutcome(BaseModel):
    ok: bool
    normalized_answers: List[NormalizedAnswer] = Field(default_factory=list)
    errors: List[SubmissionIssue] = Field(default_factory=list)


__all__ = [
    "RawAnswer",
    "SubmissionPayload",
    "NormalizedAnswer",
    "StoredAnswer",
    "Response",
    "SubmissionReceipt",
    "Pagination",
    "ResponsePage",
    "IssueKind",
    "SubmissionIssue",
    "ValidationErrorList",
    "AnswerOutcome",
    "SubmissionOutcome",
]
