"""Database bootstrap utilities for the Form Responses Service.

Convenience imports for engine construction, the transaction scope used by
the response store, and the migrations runner that applies the SQL files
shipped in `form_responses/db/migrations/`.
"""

from form_responses.db.base import dispose_engine, get_engine, transaction
from form_responses.db.migrations_runner import apply_migrations

__all__ = [
    "get_engine",
    "dispose_engine",
    "transaction",
    "apply_migrations",
]
