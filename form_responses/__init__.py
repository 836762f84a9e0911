"""FastAPI application package for the Form Responses Service.

This package exposes a small FastAPI application factory. It wires only
cross-cutting middleware (request-id) and the problem+json handlers, then
mounts the API routers. Submission validation, persistence and aggregation
live in `form_responses/logic/`; route handlers in `form_responses/routes/`.
"""

from __future__ import annotations

from form_responses.main import create_app

__all__ = ["create_app"]
