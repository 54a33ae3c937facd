"""
TodoPro Core Library

Task store and in-memory task index with support for PostgreSQL and SQLite.
"""

__version__ = "0.1.0"

from todopro.config import TodoproConfig, load_config
from todopro.db import DatabaseAdapter, get_adapter

__all__ = [
    "load_config",
    "TodoproConfig",
    "get_adapter",
    "DatabaseAdapter",
]
