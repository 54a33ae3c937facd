"""
Database abstraction layer supporting PostgreSQL and SQLite.
"""

from todopro.db.factory import build_adapter, close_adapter, get_adapter, open_index, reset_adapter
from todopro.db.interface import DatabaseAdapter
from todopro.db.migrations import run_migrations

__all__ = [
    "DatabaseAdapter",
    "build_adapter",
    "get_adapter",
    "open_index",
    "close_adapter",
    "reset_adapter",
    "run_migrations",
]
