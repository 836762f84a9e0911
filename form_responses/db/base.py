"""SQLAlchemy engine and transaction scope.

The service targets PostgreSQL in production but supports SQLite for local
development and CI. No declarative models are defined here; repositories issue
SQL through `sqlalchemy.text` and this module only manages connection
lifecycle.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool

from form_responses.config import get_settings

logger = logging.getLogger(__name__)


def _db_url() -> str:
    return (
        os.getenv("TEST_DATABASE_URL")
        or os.getenv("DATABASE_URL")
        or get_settings().database.dsn
    )


# Module-level cached Engine shared by every repository
_ENGINE: Engine | None = None
_ENGINE_URL: str | None = None


def get_engine(url: str | None = None) -> Engine:
    """Return a singleton SQLAlchemy Engine for the given URL.

    A new Engine is built only when the resolved URL changes. For SQLite
    in-memory URLs a StaticPool keeps one connection alive so every session
    and worker thread sees the same database.
    """
    global _ENGINE, _ENGINE_URL
    resolved_url = url or _db_url()

    if _ENGINE is None or _ENGINE_URL != resolved_url:
        if _ENGINE is not None:
            _ENGINE.dispose()
        kwargs: dict = {"future": True, "pool_pre_ping": True}
        if resolved_url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in resolved_url:
                kwargs["poolclass"] = StaticPool
        _ENGINE = create_engine(resolved_url, **kwargs)
        _ENGINE_URL = resolved_url
        logger.info("db.engine_created dialect=%s", _ENGINE.dialect.name)

    return _ENGINE


def dispose_engine() -> None:
    """Dispose the cached Engine so the next call rebuilds it."""
    global _ENGINE, _ENGINE_URL
    if _ENGINE is not None:
        _ENGINE.dispose()
    _ENGINE = None
    _ENGINE_URL = None


@contextmanager
def transaction(engine: Engine | None = None) -> Iterator[Connection]:
    """Yield a connection inside one database transaction.

    Commits when the block exits normally. Any exception, including
    cancellation raised mid-block, rolls the whole transaction back before it
    propagates; the connection is always returned to the pool. Failures are
    not logged here; the repository that wraps them logs once.
    """
    eng = engine or get_engine()
    conn = eng.connect()
    trans = conn.begin()
    try:
        yield conn
        trans.commit()
    except BaseException:
        trans.rollback()
        raise
    finally:
        conn.close()


__all__ = ["get_engine", "dispose_engine", "transaction"]
