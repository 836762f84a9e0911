"""Tagged answer values.

An answer is either a single string (`ScalarValue`, used by short_answer,
multiple_choice and dropdown) or an ordered set of strings
(`MultiSelectValue`, used by checkbox). The variant is always chosen from the
question's declared type, both when validating input and when decoding stored
rows, never from the shape of the incoming value.
"""

from __future__ import annotations

import json
from typing import Annotated, Any, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from form_responses.models.question import QuestionType


class ScalarValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["scalar"] = "scalar"
    text: str = ""

    @property
    def is_empty(self) -> bool:
        return self.text == ""

    def to_json(self) -> Any:
        return self.text


class MultiSelectValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["multi_select"] = "multi_select"
    selections: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return len(self.selections) == 0

    def to_json(self) -> Any:
        return list(self.selections)


AnswerValue = Annotated[Union[ScalarValue, MultiSelectValue], Field(discriminator="kind")]


def empty_value_for(question_type: str) -> ScalarValue | MultiSelectValue:
    if question_type == QuestionType.CHECKBOX:
        return MultiSelectValue()
    return ScalarValue()


def encode_value(value: ScalarValue | MultiSelectValue) -> str:
    """Serialise a value for the `answers.value_json` column."""
    return json.dumps(value.to_json(), ensure_ascii=False)


def decode_value(question_type: str, raw: str | None) -> ScalarValue | MultiSelectValue:
    """Rebuild a stored value using the owning question's type.

    Raises ValueError when the stored payload does not fit the type, which
    only happens if a row was written outside the response store.
    """
    data = json.loads(raw) if raw else None
    if question_type == QuestionType.CHECKBOX:
        if data is None:
            return MultiSelectValue()
        if not isinstance(data, list) or not all(isinstance(v, str) for v in data):
            raise ValueError("stored checkbox answer must be a list of strings")
        return MultiSelectValue(selections=tuple(data))
    if data is None:
        return ScalarValue()
    if not isinstance(data, str):
        raise ValueError(f"stored {question_type} answer must be a string")
    return ScalarValue(text=data)


__all__ = [
    "ScalarValue",
    "MultiSelectValue",
    "AnswerValue",
    "empty_value_for",
    "encode_value",
    "decode_value",
]
