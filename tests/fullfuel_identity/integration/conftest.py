"""
Pytest configuration for fullfuel_identity integration tests.

Repository tests run against in-memory SQLite by default; tests marked
``integration`` use Testcontainers for an ephemeral PostgreSQL instance.
"""

# Re-export shared database fixtures
from tests.shared.fixtures.database import (
    async_engine,
    db_session,
    postgres_container,
    sqlite_engine,
    sqlite_session,
    sqlite_session_maker,
)

__all__ = [
    "async_engine",
    "db_session",
    "postgres_container",
    "sqlite_engine",
    "sqlite_session",
    "sqlite_session_maker",
]
