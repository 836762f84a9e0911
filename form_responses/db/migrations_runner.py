"""Lightweight SQL migrations runner.

Applies .sql files in lexical order from `form_responses/db/migrations/`.
Skips rollback files and records applied filenames in a `schema_migrations`
table so a file is never applied twice against the same database. Intended
for local development, CI and single-node deployments.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

DEFAULT_MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"

_JOURNAL_DDL = (
    "CREATE TABLE IF NOT EXISTS schema_migrations ("
    " filename VARCHAR(255) PRIMARY KEY,"
    " applied_at VARCHAR(32) NOT NULL)"
)


def _iter_sql_files(root: Path) -> Iterable[Path]:
    for p in sorted(root.glob("*.sql")):
        if "rollback" in p.name.lower():
            continue
        yield p


def split_statements(sql: str) -> list[str]:
    """Split a migration script into executable statements.

    Line comments are dropped and statements are separated on ';'. The
    migration files avoid procedural bodies so this split is safe on every
    supported dialect, including pysqlite which rejects multi-statement
    execute() calls.
    """
    lines = [line for line in sql.splitlines() if not line.strip().startswith("--")]
    statements = []
    for chunk in "\n".join(lines).split(";"):
        stmt = chunk.strip()
        if stmt:
            statements.append(stmt)
    return statements


def _applied_files(conn: Connection) -> set[str]:
    rows = conn.execute(sql_text("SELECT filename FROM schema_migrations")).fetchall()
    return {str(r[0]) for r in rows}


def apply_migrations(
    engine: Engine, migrations_dir: str | os.PathLike[str] | None = None
) -> list[str]:
    """Apply pending migrations and return the filenames applied in this run."""
    root = Path(migrations_dir) if migrations_dir is not None else DEFAULT_MIGRATIONS_DIR
    if not root.exists():
        logger.warning("migrations_dir_missing path=%s", root)
        return []

    with engine.begin() as conn:
        conn.execute(sql_text(_JOURNAL_DDL))
        applied = _applied_files(conn)

    newly_applied: list[str] = []
    for sql_path in _iter_sql_files(root):
        fname = sql_path.name
        if fname in applied:
            continue
        statements = split_statements(sql_path.read_text(encoding="utf-8"))
        if not statements:
            continue
        # One transaction per file so a failing file leaves earlier ones applied
        with engine.begin() as conn:
            for stmt in statements:
                conn.exec_driver_sql(stmt)
            conn.execute(
                sql_text("INSERT INTO schema_migrations (filename, applied_at) VALUES (:f, :at)"),
                {
                    "f": fname,
                    "at": datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z"),
                },
            )
        logger.info("migration_applied file=%s statements=%d", fname, len(statements))
        newly_applied.append(fname)
    return newly_applied


__all__ = ["apply_migrations", "split_statements", "DEFAULT_MIGRATIONS_DIR"]
