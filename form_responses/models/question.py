"""Question and form models plus the question-type lookup table.

`QuestionType` is a plain constants container rather than an Enum: question
rows arrive from storage as strings and an unrecognised type must remain
representable so the validator can reject it explicitly.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class QuestionType:
    SHORT_ANSWER = "short_answer"
    MULTIPLE_CHOICE = "multiple_choice"
    CHECKBOX = "checkbox"
    DROPDOWN = "dropdown"

    ALL = (SHORT_ANSWER, MULTIPLE_CHOICE, CHECKBOX, DROPDOWN)


# Single source for "which types carry an option set"; shared by the answer
# validator, the aggregation engine and the question update rules.
TYPES_REQUIRING_OPTIONS = frozenset(
    {QuestionType.MULTIPLE_CHOICE, QuestionType.CHECKBOX, QuestionType.DROPDOWN}
)


def requires_options(question_type: str) -> bool:
    return question_type in TYPES_REQUIRING_OPTIONS


class FormStatus:
    DRAFT = "draft"
    PUBLISHED = "published"
    CLOSED = "closed"


class Form(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    status: str = FormStatus.DRAFT
    owner_id: Optional[str] = None

    @property
    def accepts_submissions(self) -> bool:
        return self.status == FormStatus.PUBLISHED


class Question(BaseModel):
    id: str
    form_id: Optional[str] = None
    title: str = ""
    type: str
    options: List[str] = Field(default_factory=list)
    is_required: bool = False
    order_index: int = 0


class QuestionUpdate(BaseModel):
    """Partial update payload for a question; unset fields are left as-is."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    type: Optional[str] = None
    options: Optional[List[str]] = None
    is_required: Optional[bool] = None
    order_index: Optional[int] = Field(default=None, ge=0)


__all__ = [
    "QuestionType",
    "TYPES_REQUIRING_OPTIONS",
    "requires_options",
    "FormStatus",
    "Form",
    "Question",
    "QuestionUpdate",
]
