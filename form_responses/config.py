"""Configuration utilities for the Form Responses Service.

This module loads application configuration with the following rules:
- Primary source: `forms_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG_FILE = Path("forms_config.json")
logger = logging.getLogger(__name__)

DEFAULT_DSN = "sqlite+pysqlite:///:memory:"


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class DatabaseConfig(BaseModel):
    dsn: str

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.dsn must be a non-empty string")
        return v.strip()


class SubmissionsConfig(BaseModel):
    short_answer_max_length: int = Field(default=5000, gt=0)


class AnalyticsConfig(BaseModel):
    # Tokens shorter than this are dropped from word frequencies
    min_word_length: int = Field(default=3, ge=1)
    top_words_limit: int = Field(default=10, gt=0)


class ExportConfig(BaseModel):
    include_header: bool = Field(default=True)


class AppConfig(BaseModel):
    database: DatabaseConfig
    submissions: SubmissionsConfig
    analytics: AnalyticsConfig
    export: ExportConfig


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def _as_bool(text: Optional[str]) -> bool:
    return str(text).strip().lower() in {"1", "true", "yes", "on"}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) forms_config.json at project root
    4) Safe defaults for development
    """

    base = _read_json_file(ROOT_CONFIG_FILE)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    dsn = (
        _env("TEST_DATABASE_URL")
        or _env("DATABASE_URL")
        or _read_config_file("database.url")
        or _base("database.dsn")
        or DEFAULT_DSN
    )
    max_length_text = (
        _env("SHORT_ANSWER_MAX_LENGTH")
        or _read_config_file("submissions.short_answer_max_length")
        or _base("submissions.short_answer_max_length", "5000")
    )
    min_word_text = (
        _env("ANALYTICS_MIN_WORD_LENGTH")
        or _read_config_file("analytics.min_word_length")
        or _base("analytics.min_word_length", "3")
    )
    top_words_text = (
        _env("ANALYTICS_TOP_WORDS_LIMIT")
        or _read_config_file("analytics.top_words_limit")
        or _base("analytics.top_words_limit", "10")
    )
    include_header_text = (
        _env("CSV_EXPORT_INCLUDE_HEADER")
        or _read_config_file("export.include_header")
        or _base("export.include_header", "true")
    )

    try:
        cfg = AppConfig(
            database=DatabaseConfig(dsn=dsn),
            submissions=SubmissionsConfig(short_answer_max_length=int(str(max_length_text).strip())),
            analytics=AnalyticsConfig(
                min_word_length=int(str(min_word_text).strip()),
                top_words_limit=int(str(top_words_text).strip()),
            ),
            export=ExportConfig(include_header=_as_bool(include_header_text)),
        )
        return cfg
    except (PydanticValidationError, ValueError) as e:
        logger.error("Invalid application configuration: %s", e)
        raise


@lru_cache(maxsize=1)
def get_settings() -> AppConfig:
    """Return the process-wide configuration, loading it on first use."""
    return load_config()


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "SubmissionsConfig",
    "AnalyticsConfig",
    "ExportConfig",
    "load_config",
    "get_settings",
]
