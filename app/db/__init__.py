"""Database bootstrap utilities for the program question bank service.

Exposes engine construction and the SQL migrations runner that applies files
from the local migrations/ directory. The DB layer does not leak ORM models
into route handlers; repositories return plain dicts and domain snapshots.
"""

from app.db.base import get_engine, reset_engine
from app.db.migrations_runner import apply_migrations

__all__ = [
    "get_engine",
    "reset_engine",
    "apply_migrations",
]
