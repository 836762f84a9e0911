from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from form_responses.db.base import get_engine
from form_responses.db.migrations_runner import apply_migrations
from form_responses.http.problem import (
    handle_domain_error,
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from form_responses.http.request_id import RequestIdMiddleware
from form_responses.logging_setup import configure_logging
from form_responses.logic.errors import FormsDomainError
from form_responses.routes import api_router

logger = logging.getLogger(__name__)


def _health_check() -> Callable[[], dict]:
    def check() -> dict:
        try:
            with get_engine().connect() as conn:
                conn.execute(sql_text("SELECT 1"))
            return {"status": "ok", "db": True}
        except SQLAlchemyError as e:
            logger.error("Health DB check failed", exc_info=True)
            return {"status": "degraded", "db": False, "reason": str(e)}

    return check


@asynccontextmanager
async def _lifespan(app: FastAPI):
    if os.getenv("AUTO_APPLY_MIGRATIONS", "").strip().lower() in {"1", "true", "yes"}:
        applied = apply_migrations(get_engine())
        logger.info("startup.migrations_applied count=%d", len(applied))
    yield


def create_app() -> FastAPI:
    # Configure global logging before app instantiation so all modules emit
    configure_logging()
    app = FastAPI(title="Form Responses Service", lifespan=_lifespan)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(FormsDomainError, handle_domain_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router, prefix="/api/v1")

    check = _health_check()

    @app.get("/health")
    def health() -> JSONResponse:
        result = check()
        return JSONResponse(result, status_code=200 if result.get("status") == "ok" else 503)

    return app


__all__ = ["create_app"]
