"""Functional tests for configuration loading precedence."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from form_responses.config import DEFAULT_DSN, load_config


@pytest.fixture()
def isolated_cwd(tmp_path, monkeypatch):
    for key in (
        "TEST_DATABASE_URL",
        "DATABASE_URL",
        "SHORT_ANSWER_MAX_LENGTH",
        "ANALYTICS_MIN_WORD_LENGTH",
        "ANALYTICS_TOP_WORDS_LIMIT",
        "CSV_EXPORT_INCLUDE_HEADER",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_defaults_without_any_source(isolated_cwd):
    cfg = load_config()
    assert cfg.database.dsn == DEFAULT_DSN
    assert cfg.submissions.short_answer_max_length == 5000
    assert cfg.analytics.min_word_length == 3
    assert cfg.analytics.top_words_limit == 10
    assert cfg.export.include_header is True


def test_json_file_then_config_dir_then_env(isolated_cwd, monkeypatch):
    (isolated_cwd / "forms_config.json").write_text(
        json.dumps({"database": {"dsn": "sqlite:///from-json.db"}, "analytics": {"top_words_limit": 5}}),
        encoding="utf-8",
    )
    cfg = load_config()
    assert cfg.database.dsn == "sqlite:///from-json.db"
    assert cfg.analytics.top_words_limit == 5

    (isolated_cwd / "config").mkdir()
    (isolated_cwd / "config" / "database.url").write_text("sqlite:///from-file.db\n", encoding="utf-8")
    assert load_config().database.dsn == "sqlite:///from-file.db"

    monkeypatch.setenv("DATABASE_URL", "sqlite:///from-env.db")
    monkeypatch.setenv("CSV_EXPORT_INCLUDE_HEADER", "off")
    cfg = load_config()
    assert cfg.database.dsn == "sqlite:///from-env.db"
    assert cfg.export.include_header is False


def test_invalid_limits_are_rejected(isolated_cwd, monkeypatch):
    monkeypatch.setenv("SHORT_ANSWER_MAX_LENGTH", "0")
    with pytest.raises(ValidationError):
        load_config()
