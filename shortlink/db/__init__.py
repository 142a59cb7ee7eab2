"""Database module for the URL shortener application."""
from shortlink.db.base import (
    DatabaseHealthCheck,
    async_session_factory,
    engine,
    get_engine,
    get_session,
    init_db,
)
from shortlink.db.session import db_transaction, get_db

__all__ = [
    "engine",
    "get_engine",
    "get_session",
    "async_session_factory",
    "init_db",
    "DatabaseHealthCheck",
    "get_db",
    "db_transaction",
]
