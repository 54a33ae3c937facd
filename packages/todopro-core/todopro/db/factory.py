"""
Process-wide wiring: one database adapter, and the task index built on it.
"""

import logging

from todopro.config import DatabaseConfig, TodoproConfig, load_config
from todopro.db.interface import DatabaseAdapter
from todopro.errors import UpstreamError

logger = logging.getLogger(__name__)

_adapter: DatabaseAdapter | None = None


def build_adapter(database: DatabaseConfig) -> DatabaseAdapter:
    """
    Construct (but do not connect) the adapter a database section asks for.

    Raises:
        UpstreamError: On an unknown type or a postgres section without a URL
    """
    kind = database.type.lower()

    if kind in ("postgres", "postgresql"):
        if not database.postgres_url:
            raise UpstreamError(
                "database.type is postgres but no URL is set "
                "(database.postgres.url, database.postgres.url_env or TODOPRO_DATABASE_URL)"
            )
        from todopro.db.postgres import PostgresAdapter
        return PostgresAdapter(database.postgres_url)

    if kind == "sqlite":
        from todopro.db.sqlite import SQLiteAdapter
        return SQLiteAdapter(database.sqlite_path)

    raise UpstreamError(f"Unknown database type {database.type!r}; expected 'sqlite' or 'postgres'")


def get_adapter(config: TodoproConfig | None = None) -> DatabaseAdapter:
    """The shared adapter, built from config (or ~/.todopro/config.yaml) on first use."""
    global _adapter
    if _adapter is None:
        _adapter = build_adapter((config or load_config()).database)
        logger.info(f"Using {type(_adapter).__name__}")
    return _adapter


async def open_index(config: TodoproConfig | None = None):
    """
    Connect the shared adapter, apply pending migrations and build a TaskIndex.

    Args:
        config: Optional TodoproConfig; loaded from disk when omitted

    Returns:
        TaskIndex over a TaskStore on the shared adapter
    """
    from todopro.db.migrations import run_migrations
    from todopro.services import TaskIndex, TaskStore

    config = config or load_config()
    adapter = get_adapter(config)
    await adapter.connect()

    applied = await run_migrations(adapter)
    if applied:
        logger.info(f"Applied migrations: {', '.join(applied)}")

    return TaskIndex(TaskStore(adapter), settings=config.index)


async def close_adapter() -> None:
    """Close and forget the shared adapter."""
    global _adapter
    if _adapter is not None:
        await _adapter.close()
        _adapter = None


def reset_adapter() -> None:
    """Forget the shared adapter without closing it (tests, config changes)."""
    global _adapter
    _adapter = None
