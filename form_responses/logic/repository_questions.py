"""Question data access helpers.

The question schema provider for submissions and statistics: returns the
questions currently belonging to a form in display order. Reads open a
fresh connection unless the caller passes one, so edits committed by the
same service are visible immediately. Writes always run on the caller's
connection inside its transaction.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection

from form_responses.db.base import get_engine
from form_responses.models.question import Question

logger = logging.getLogger(__name__)

_SELECT_COLUMNS = "id, form_id, title, type, options_json, is_required, order_index"


def _row_to_question(row: Mapping[str, Any]) -> Question:
    options_raw = row["options_json"]
    return Question(
        id=str(row["id"]),
        form_id=str(row["form_id"]),
        title=row["title"],
        type=row["type"],
        options=json.loads(options_raw) if options_raw else [],
        is_required=bool(row["is_required"]),
        order_index=int(row["order_index"] or 0),
    )


def get_questions_for_form(form_id: str) -> List[Question]:
    """Return the form's questions ordered by `order_index`, then id."""
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                f"SELECT {_SELECT_COLUMNS} FROM questions WHERE form_id = :fid "
                "ORDER BY order_index ASC, id ASC"
            ),
            {"fid": str(form_id)},
        ).mappings().all()
    return [_row_to_question(r) for r in rows]


def get_question(
    form_id: str, question_id: str, conn: Optional[Connection] = None, *, for_update: bool = False
) -> Optional[Question]:
    """Fetch one question of a form.

    Pass `conn` to read inside a caller's transaction; `for_update` then
    locks the row on PostgreSQL until that transaction ends.
    """
    if conn is None:
        with get_engine().connect() as own:
            return get_question(form_id, question_id, own)
    sql = f"SELECT {_SELECT_COLUMNS} FROM questions WHERE id = :qid AND form_id = :fid"
    if for_update and conn.dialect.name == "postgresql":
        sql += " FOR UPDATE"
    row = conn.execute(
        sql_text(sql), {"qid": str(question_id), "fid": str(form_id)}
    ).mappings().fetchone()
    return _row_to_question(row) if row is not None else None


_UPDATABLE = {"title", "type", "is_required", "order_index"}


def update_question(
    conn: Connection,
    question_id: str,
    changes: Dict[str, Any],
    *,
    unless_submissions_for: Optional[str] = None,
) -> bool:
    """Apply already-validated column changes to one question on `conn`.

    `options` is accepted as a list and stored as JSON text. With
    `unless_submissions_for` set, the UPDATE only matches while that form
    has no responses. Returns False when no row was changed.
    """
    params: Dict[str, Any] = {"qid": str(question_id)}
    assignments: List[str] = []
    for key, value in changes.items():
        if key == "options":
            assignments.append("options_json = :options_json")
            params["options_json"] = json.dumps(value, ensure_ascii=False) if value else None
        elif key in _UPDATABLE:
            assignments.append(f"{key} = :{key}")
            params[key] = value
    if not assignments:
        return True
    sql = f"UPDATE questions SET {', '.join(assignments)} WHERE id = :qid"
    if unless_submissions_for is not None:
        sql += " AND NOT EXISTS (SELECT 1 FROM responses WHERE form_id = :guard_fid)"
        params["guard_fid"] = str(unless_submissions_for)
    result = conn.execute(sql_text(sql), params)
    return (result.rowcount or 0) > 0


__all__ = ["get_questions_for_form", "get_question", "update_question"]
