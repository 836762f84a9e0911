"""Domain exceptions raised by the submission and statistics services.

Each class carries the HTTP status, problem code and title used when the
global handler renders it as problem+json. Per-answer validation problems are
never raised; they are collected into a `ValidationErrorList` instead.
"""

from __future__ import annotations


class FormsDomainError(Exception):
    status = 400
    code = "DOMAIN_ERROR"
    title = "Bad Request"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FormNotFoundError(FormsDomainError):
    status = 404
    code = "FORM_NOT_FOUND"
    title = "Not Found"

    def __init__(self, form_id: str) -> None:
        super().__init__("Form not found.")
        self.form_id = form_id


class ResponseNotFoundError(FormsDomainError):
    status = 404
    code = "RESPONSE_NOT_FOUND"
    title = "Not Found"

    def __init__(self, response_id: str) -> None:
        super().__init__("Response not found in this form.")
        self.response_id = response_id


class QuestionNotFoundError(FormsDomainError):
    status = 404
    code = "QUESTION_NOT_FOUND"
    title = "Not Found"

    def __init__(self, question_id: str) -> None:
        super().__init__("Question not found in this form.")
        self.question_id = question_id


class DomainStateError(FormsDomainError):
    """The form is in a state where submissions make no sense (e.g. draft)."""

    status = 403
    code = "FORM_NOT_PUBLISHED"
    title = "Forbidden"


class QuestionRuleError(FormsDomainError):
    status = 400
    code = "QUESTION_INVALID"


class QuestionFrozenError(QuestionRuleError):
    """A mutation not allowed once the form has submissions."""

    status = 409
    code = "QUESTION_FROZEN"
    title = "Conflict"


class PersistenceError(FormsDomainError):
    status = 500
    code = "PERSISTENCE_FAILED"
    title = "Internal Server Error"


__all__ = [
    "FormsDomainError",
    "FormNotFoundError",
    "ResponseNotFoundError",
    "QuestionNotFoundError",
    "DomainStateError",
    "QuestionRuleError",
    "QuestionFrozenError",
    "PersistenceError",
]
