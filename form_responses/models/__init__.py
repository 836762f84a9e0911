"""Domain and transport models for the Form Responses Service."""

from form_responses.models.answer_value import MultiSelectValue, ScalarValue
from form_responses.models.question import Form, FormStatus, Question, QuestionType
from form_responses.models.statistics import FormStatistics, QuestionStats
from form_responses.models.submission import (
    NormalizedAnswer,
    RawAnswer,
    Response,
    SubmissionIssue,
    ValidationErrorList,
)

__all__ = [
    "ScalarValue",
    "MultiSelectValue",
    "Form",
    "FormStatus",
    "Question",
    "QuestionType",
    "FormStatistics",
    "QuestionStats",
    "NormalizedAnswer",
    "RawAnswer",
    "Response",
    "SubmissionIssue",
    "ValidationErrorList",
]
