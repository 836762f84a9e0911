"""RFC4180 CSV export of a form's responses.

One row per response, oldest first; fixed leading columns followed by one
column per question in display order. Checkbox selections are joined with
'|'; unanswered questions export as empty cells.
"""

from __future__ import annotations

import csv
import io
from typing import Dict, Iterable, List, Sequence

from form_responses.models.answer_value import MultiSelectValue, ScalarValue
from form_responses.models.question import Question
from form_responses.models.submission import Response


FIXED_HEADER = ["response_id", "submitted_at", "respondent_id"]
SELECTION_SEPARATOR = "|"


def _cell(value: ScalarValue | MultiSelectValue) -> str:
    if isinstance(value, MultiSelectValue):
        return SELECTION_SEPARATOR.join(value.selections)
    return value.text


def build_responses_csv(
    questions: Sequence[Question],
    responses: Iterable[Response],
    *,
    include_header: bool = True,
) -> bytes:
    buf = io.StringIO(newline="")
    writer = csv.writer(buf)
    if include_header:
        writer.writerow(FIXED_HEADER + [q.title for q in questions])
    for response in responses:
        by_question: Dict[str, str] = {a.question_id: _cell(a.value) for a in response.answers}
        row: List[str] = [
            response.id,
            response.submitted_at.isoformat().replace("+00:00", "Z"),
            response.respondent_id or "",
        ]
        row.extend(by_question.get(q.id, "") for q in questions)
        writer.writerow(row)
    return buf.getvalue().encode("utf-8")


__all__ = ["FIXED_HEADER", "SELECTION_SEPARATOR", "build_responses_csv"]
