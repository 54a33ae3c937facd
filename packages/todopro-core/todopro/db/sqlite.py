"""
SQLite database adapter using aiosqlite.

Provides graceful degradation for features not available in SQLite:
- Full-text search: Falls back to per-term LIKE matching
- Arrays: Stored as JSON arrays
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional, List, Any

import aiosqlite

from todopro.db.interface import LIKE_ESCAPE, DatabaseAdapter
from todopro.errors import ConflictError

logger = logging.getLogger(__name__)


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite adapter with graceful feature degradation.

    Uses aiosqlite for async database operations.
    Automatically creates the database file and parent directories.
    """

    def __init__(self, db_path: str = "~/.todopro/todopro.db"):
        """
        Initialize SQLite adapter.

        Args:
            db_path: Path to SQLite database file.
                    Supports ~ expansion for home directory.
        """
        self.db_path = Path(db_path).expanduser()
        self._conn: Optional[aiosqlite.Connection] = None

    async def connect(self) -> None:
        """Initialize database connection and create file if needed."""
        if self._conn is not None:
            return

        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        # Connect (creates file if doesn't exist)
        self._conn = await aiosqlite.connect(str(self.db_path))

        await self._conn.execute("PRAGMA foreign_keys = ON")

        # Use WAL mode for better concurrent access
        await self._conn.execute("PRAGMA journal_mode = WAL")

        # Row factory to return dicts
        self._conn.row_factory = aiosqlite.Row

        logger.info(f"SQLite database connected: {self.db_path}")

    async def close(self) -> None:
        """Close database connection."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.info("SQLite connection closed")

    async def _get_conn(self) -> aiosqlite.Connection:
        """Get or create connection."""
        if self._conn is None:
            await self.connect()
        return self._conn

    async def execute(self, query: str, *args) -> str:
        """Execute query and return status."""
        conn = await self._get_conn()
        query = self.format_query(query)

        try:
            cursor = await conn.execute(query, args)
        except sqlite3.IntegrityError as e:
            if "UNIQUE" in str(e):
                raise ConflictError(str(e)) from e
            raise
        await conn.commit()

        # Return a status string similar to PostgreSQL
        verb = query.strip().split(None, 1)[0].upper() if query.strip() else ""
        if verb == "INSERT":
            return f"INSERT 0 {cursor.rowcount}"
        elif verb in ("UPDATE", "DELETE"):
            return f"{verb} {cursor.rowcount}"
        return "OK"

    async def fetch(self, query: str, *args) -> List[dict]:
        """Fetch rows as list of dicts."""
        conn = await self._get_conn()
        query = self.format_query(query)

        cursor = await conn.execute(query, args)
        rows = await cursor.fetchall()

        return [dict(row) for row in rows]

    async def fetchrow(self, query: str, *args) -> Optional[dict]:
        """Fetch single row as dict."""
        conn = await self._get_conn()
        query = self.format_query(query)

        cursor = await conn.execute(query, args)
        row = await cursor.fetchone()

        return dict(row) if row else None

    async def fetchval(self, query: str, *args) -> Any:
        """Fetch single value."""
        conn = await self._get_conn()
        query = self.format_query(query)

        cursor = await conn.execute(query, args)
        row = await cursor.fetchone()

        if row:
            return row[0]
        return None

    @property
    def supports_fts(self) -> bool:
        """SQLite doesn't support PostgreSQL-style FTS."""
        return False

    @property
    def supports_arrays(self) -> bool:
        """SQLite doesn't support native arrays (use JSON)."""
        return False

    @property
    def placeholder_style(self) -> str:
        """SQLite uses ? style placeholders."""
        return "qmark"

    async def search_text(
        self,
        table: str,
        query: str,
        columns: List[str],
        limit: int = 20,
        filters: Optional[dict] = None,
    ) -> List[dict]:
        """
        Text search using LIKE, one literal pattern per query term.

        A row matches if any term appears in any column. Rows are ranked
        by how many (term, column) pairs match, newest first on ties.
        """
        terms = query.split()
        if not terms:
            return []

        patterns = [self.like_pattern(term) for term in terms for _ in columns]
        matches = [f"({col} LIKE ? {LIKE_ESCAPE})" for _ in terms for col in columns]
        rank_sql = " + ".join(matches)

        where_parts = [f"({' OR '.join(matches)})"]
        params: List[Any] = patterns + patterns
        for column, value in (filters or {}).items():
            where_parts.append(f"{column} = ?")
            params.append(value)

        where_sql = " AND ".join(where_parts)

        sql = f"""
            SELECT *, ({rank_sql}) AS _rank
            FROM {table}
            WHERE {where_sql}
            ORDER BY _rank DESC, created_at DESC
            LIMIT ?
        """
        params.append(limit)

        return await self.fetch(sql, *params)
