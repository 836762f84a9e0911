"""Central logging configuration for the service.

Installs a single stdout handler on the root logger so every module logger
(`logging.getLogger(__name__)`) emits without per-module setup. The level
comes from LOG_LEVEL (default INFO). uvicorn loggers are routed to the same
handler and repeated calls are no-ops so reloaders do not duplicate output.
"""
from __future__ import annotations

import logging
import os
from logging.config import dictConfig


def _build_config(level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s:%(name)s:%(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            "form_responses": {"level": level, "propagate": True},
            "uvicorn": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "uvicorn.error": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": "INFO", "handlers": ["console"], "propagate": False},
        },
    }


def configure_logging(level: str | None = None) -> None:
    """Configure application-wide logging once.

    If the root logger already has handlers (pytest capture, reloaders, an
    embedding application) the existing setup is left untouched.
    """
    root = logging.getLogger()
    if root.handlers:
        return
    resolved = (level or os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    if resolved not in logging.getLevelNamesMapping():
        resolved = "INFO"
    dictConfig(_build_config(resolved))


__all__ = ["configure_logging"]
