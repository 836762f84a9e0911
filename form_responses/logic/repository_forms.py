"""Form data access helpers.

Read-only lookups the submission flow needs about a form: its state and
whether it already has submissions. Keeps route handlers free of inline SQL.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection

from form_responses.db.base import get_engine
from form_responses.models.question import Form, FormStatus

logger = logging.getLogger(__name__)


def get_form(form_id: str) -> Optional[Form]:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text(
                "SELECT id, title, description, status, owner_id FROM forms WHERE id = :fid"
            ),
            {"fid": str(form_id)},
        ).mappings().fetchone()
    if row is None:
        return None
    return Form(
        id=str(row["id"]),
        title=row["title"],
        description=row["description"],
        status=row["status"],
        owner_id=row["owner_id"],
    )


def is_published(form_id: str) -> bool:
    form = get_form(form_id)
    return form is not None and form.status == FormStatus.PUBLISHED


def has_submissions(form_id: str, conn: Optional[Connection] = None) -> bool:
    """Return True once any response row exists for the form."""
    if conn is None:
        with get_engine().connect() as own:
            return has_submissions(form_id, own)
    row = conn.execute(
        sql_text("SELECT 1 FROM responses WHERE form_id = :fid LIMIT 1"),
        {"fid": str(form_id)},
    ).fetchone()
    return row is not None


__all__ = ["get_form", "is_published", "has_submissions"]
