"""Response store: transactional writes and reads of responses with answers.

`create_with_answers` is the only write path for submissions. The response
row and every answer row are inserted inside a single transaction; if any
insert fails the whole transaction rolls back, so a response never exists
with a partial answer set. No form or question rows are locked, so
concurrent submissions to the same form proceed independently. The UNIQUE
(response_id, question_id) constraint on `answers` is the store-level guard
against duplicate answers.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from form_responses.db.base import get_engine, transaction
from form_responses.logic.errors import PersistenceError
from form_responses.models.answer_value import decode_value, encode_value
from form_responses.models.submission import NormalizedAnswer, Response, StoredAnswer

logger = logging.getLogger(__name__)

_SORT_DIRECTIONS = {"asc": "ASC", "desc": "DESC"}

_RESPONSES_WITH_ANSWERS_SQL = """
    SELECT r.id AS response_id, r.form_id, r.respondent_id, r.submitted_at,
           a.id AS answer_id, a.question_id, a.value_json,
           q.title AS question_title, q.type AS question_type
    FROM responses r
    LEFT JOIN answers a ON a.response_id = r.id
    LEFT JOIN questions q ON q.id = a.question_id
    WHERE {where}
    ORDER BY r.submitted_at ASC, r.id ASC, a.position ASC
"""


def format_timestamp(dt: datetime | None = None) -> str:
    """RFC3339 UTC timestamp with microseconds and a trailing 'Z'.

    Fixed precision keeps lexical order equal to chronological order.
    """
    base = (dt or datetime.now(timezone.utc)).astimezone(timezone.utc).isoformat(timespec="microseconds")
    return base.replace("+00:00", "Z")


def _insert_response(
    conn: Connection, response_id: str, form_id: str, respondent_id: Optional[str], submitted_at: str
) -> None:
    conn.execute(
        sql_text(
            """
            INSERT INTO responses (id, form_id, respondent_id, submitted_at)
            VALUES (:rid, :fid, :respondent, :submitted_at)
            """
        ),
        {"rid": response_id, "fid": form_id, "respondent": respondent_id, "submitted_at": submitted_at},
    )


def _insert_answer(conn: Connection, response_id: str, position: int, answer: NormalizedAnswer) -> str:
    answer_id = str(uuid.uuid4())
    conn.execute(
        sql_text(
            """
            INSERT INTO answers (id, response_id, question_id, position, value_json)
            VALUES (:aid, :rid, :qid, :pos, :value)
            """
        ),
        {
            "aid": answer_id,
            "rid": response_id,
            "qid": answer.question_id,
            "pos": position,
            "value": encode_value(answer.value),
        },
    )
    return answer_id


def create_with_answers(
    form_id: str, respondent_id: Optional[str], answers: Sequence[NormalizedAnswer]
) -> Response:
    """Persist one response and all of its answers atomically.

    Answers are inserted in input order. Any database failure rolls back
    everything, including the response row, and is raised as a single
    PersistenceError.
    """
    response_id = str(uuid.uuid4())
    submitted_at = format_timestamp()
    stored: List[StoredAnswer] = []
    try:
        with transaction() as conn:
            _insert_response(conn, response_id, str(form_id), respondent_id, submitted_at)
            for position, answer in enumerate(answers):
                answer_id = _insert_answer(conn, response_id, position, answer)
                stored.append(StoredAnswer(id=answer_id, question_id=answer.question_id, value=answer.value))
    except SQLAlchemyError as exc:
        logger.error(
            "create_with_answers failed form_id=%s answers=%d", form_id, len(answers), exc_info=True
        )
        raise PersistenceError("The response could not be stored. No answers were saved.") from exc

    logger.info("response_stored response_id=%s form_id=%s answers=%d", response_id, form_id, len(stored))
    return Response(
        id=response_id,
        form_id=str(form_id),
        respondent_id=respondent_id,
        submitted_at=submitted_at,
        answers=stored,
    )


def _collect_responses(rows: Sequence[Mapping[str, Any]]) -> List[Response]:
    by_id: Dict[str, Response] = {}
    for row in rows:
        rid = str(row["response_id"])
        response = by_id.get(rid)
        if response is None:
            response = Response(
                id=rid,
                form_id=str(row["form_id"]),
                respondent_id=row["respondent_id"],
                submitted_at=row["submitted_at"],
            )
            by_id[rid] = response
        if row["answer_id"] is None or row["question_type"] is None:
            continue
        response.answers.append(
            StoredAnswer(
                id=str(row["answer_id"]),
                question_id=str(row["question_id"]),
                question_title=row["question_title"],
                question_type=row["question_type"],
                value=decode_value(row["question_type"], row["value_json"]),
            )
        )
    return list(by_id.values())


def find_by_form_id(form_id: str) -> List[Response]:
    """Return every response of a form with decoded answers, oldest first."""
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(_RESPONSES_WITH_ANSWERS_SQL.format(where="r.form_id = :fid")),
            {"fid": str(form_id)},
        ).mappings().all()
    return _collect_responses(rows)


def find_by_id(response_id: str) -> Optional[Response]:
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(_RESPONSES_WITH_ANSWERS_SQL.format(where="r.id = :rid")),
            {"rid": str(response_id)},
        ).mappings().all()
    responses = _collect_responses(rows)
    return responses[0] if responses else None


def count_for_form(form_id: str) -> int:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text("SELECT COUNT(*) FROM responses WHERE form_id = :fid"),
            {"fid": str(form_id)},
        ).fetchone()
    return int(row[0]) if row and row[0] is not None else 0


def list_page(form_id: str, *, page: int, limit: int, sort: str) -> Tuple[List[Response], int]:
    """Return one page of responses (without answers) and the total count."""
    direction = _SORT_DIRECTIONS.get(sort, "DESC")
    total = count_for_form(form_id)
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                "SELECT id, form_id, respondent_id, submitted_at FROM responses "
                f"WHERE form_id = :fid ORDER BY submitted_at {direction}, id {direction} "
                "LIMIT :limit OFFSET :offset"
            ),
            {"fid": str(form_id), "limit": int(limit), "offset": (int(page) - 1) * int(limit)},
        ).mappings().all()
    responses = [
        Response(
            id=str(r["id"]),
            form_id=str(r["form_id"]),
            respondent_id=r["respondent_id"],
            submitted_at=r["submitted_at"],
        )
        for r in rows
    ]
    return responses, total


def delete_response(response_id: str) -> bool:
    """Delete a response and its answers in one transaction."""
    try:
        with transaction() as conn:
            conn.execute(sql_text("DELETE FROM answers WHERE response_id = :rid"), {"rid": str(response_id)})
            result = conn.execute(sql_text("DELETE FROM responses WHERE id = :rid"), {"rid": str(response_id)})
            deleted = result.rowcount or 0
    except SQLAlchemyError as exc:
        logger.error("delete_response failed response_id=%s", response_id, exc_info=True)
        raise PersistenceError("The response could not be deleted.") from exc
    return deleted > 0


__all__ = [
    "format_timestamp",
    "create_with_answers",
    "find_by_form_id",
    "find_by_id",
    "count_for_form",
    "list_page",
    "delete_response",
]
