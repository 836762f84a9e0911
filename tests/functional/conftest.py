"""Functional test bootstrap.

Points the service at a file-backed SQLite database before anything builds
the engine, applies the packaged migrations once per session and empties
the tables before each test. Settings and the engine are rebuilt so the
environment overrides take effect.
"""

from __future__ import annotations

import os
import pathlib

import pytest

_ROOT = pathlib.Path(__file__).resolve().parents[2]
_DB_FILE = _ROOT / "tmp" / "functional_tests.db"
_DB_FILE.parent.mkdir(parents=True, exist_ok=True)
if _DB_FILE.exists():
    _DB_FILE.unlink()

# Use a file-backed SQLite DB to ensure persistence across connections
os.environ["TEST_DATABASE_URL"] = f"sqlite:///{_DB_FILE}"
# Migrations are applied explicitly below, not on app startup
os.environ["AUTO_APPLY_MIGRATIONS"] = "0"


@pytest.fixture(scope="session", autouse=True)
def functional_sqlite_bootstrap():
    from form_responses.config import get_settings
    from form_responses.db.base import dispose_engine, get_engine
    from form_responses.db.migrations_runner import apply_migrations

    get_settings.cache_clear()
    dispose_engine()
    apply_migrations(get_engine(os.environ["TEST_DATABASE_URL"]))
    yield
    dispose_engine()


@pytest.fixture(autouse=True)
def clean_tables(functional_sqlite_bootstrap):
    from form_responses.logic.events import get_buffered_events
    from tests.support.seeding import reset_tables

    reset_tables()
    get_buffered_events(clear=True)
    yield


@pytest.fixture()
def client():
    from fastapi.testclient import TestClient

    from form_responses.main import create_app

    with TestClient(create_app()) as c:
        yield c


@pytest.fixture()
def survey_form():
    """A published form with one question of each type.

    Returns a dict of ids: form, name (short_answer, required), colour
    (multiple_choice, required), extras (checkbox), size (dropdown).
    """
    from tests.support.seeding import seed_form, seed_question

    form_id = seed_form("published", title="Team survey")
    return {
        "form": form_id,
        "name": seed_question(form_id, title="Your name", type="short_answer", is_required=True, order_index=0),
        "colour": seed_question(
            form_id,
            title="Favourite colour",
            type="multiple_choice",
            options=["Red", "Green", "Blue"],
            is_required=True,
            order_index=1,
        ),
        "extras": seed_question(
            form_id, title="Extras", type="checkbox", options=["A", "B", "C"], order_index=2
        ),
        "size": seed_question(
            form_id, title="Shirt size", type="dropdown", options=["S", "M", "L"], order_index=3
        ),
    }
