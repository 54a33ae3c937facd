"""
PostgreSQL database adapter using asyncpg.

Tasks live in the todopro schema. Ranked search uses the generated
search_vector column from migrations/postgres/001_tasks.sql; tags and
dependencies are native TEXT[] columns.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional

from todopro.db.interface import LIKE_ESCAPE, DatabaseAdapter
from todopro.errors import ConflictError, UpstreamError

logger = logging.getLogger(__name__)

try:
    import asyncpg
    HAS_ASYNCPG = True
except ImportError:
    HAS_ASYNCPG = False
    asyncpg = None


class PostgresAdapter(DatabaseAdapter):
    """asyncpg pool bound to the event loop that opened it."""

    def __init__(self, connection_url: str, min_size: int = 1, max_size: int = 5):
        if not HAS_ASYNCPG:
            raise UpstreamError("asyncpg not installed. Run: pip install todopro[postgres]")

        self.url = connection_url
        self.min_size = min_size
        self.max_size = max_size
        self._pool: Optional["asyncpg.Pool"] = None
        self._pool_loop: Optional[asyncio.AbstractEventLoop] = None

    async def connect(self) -> None:
        loop = asyncio.get_running_loop()
        if self._pool is not None and self._pool_loop is loop:
            return

        # A pool cannot be used from another loop (e.g. a new asyncio.run)
        if self._pool is not None:
            self._pool.terminate()
            self._pool = None

        try:
            self._pool = await asyncpg.create_pool(
                self.url,
                min_size=self.min_size,
                max_size=self.max_size,
                statement_cache_size=0,  # pgbouncer transaction pooling
            )
        except (OSError, asyncpg.PostgresError) as e:
            raise UpstreamError(f"Could not connect to PostgreSQL: {e}") from e

        self._pool_loop = loop
        logger.info("PostgreSQL connection pool initialized")

    async def close(self) -> None:
        if self._pool is None:
            return
        try:
            await asyncio.wait_for(self._pool.close(), timeout=10)
        except (asyncio.TimeoutError, asyncpg.InterfaceError) as e:
            logger.warning(f"Graceful pool close failed, terminating: {e}")
            self._pool.terminate()
        self._pool = None
        self._pool_loop = None
        logger.info("PostgreSQL connection pool closed")

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator["asyncpg.Connection"]:
        await self.connect()
        async with self._pool.acquire() as conn:
            yield conn

    async def execute(self, query: str, *args) -> str:
        async with self._connection() as conn:
            try:
                return await conn.execute(query, *args)
            except asyncpg.UniqueViolationError as e:
                raise ConflictError(str(e)) from e

    async def fetch(self, query: str, *args) -> List[dict]:
        async with self._connection() as conn:
            return [dict(row) for row in await conn.fetch(query, *args)]

    async def fetchrow(self, query: str, *args) -> Optional[dict]:
        async with self._connection() as conn:
            row = await conn.fetchrow(query, *args)
        return dict(row) if row else None

    async def fetchval(self, query: str, *args) -> Any:
        async with self._connection() as conn:
            return await conn.fetchval(query, *args)

    @property
    def supports_fts(self) -> bool:
        return True

    @property
    def supports_arrays(self) -> bool:
        return True

    @property
    def placeholder_style(self) -> str:
        return "dollar"

    async def search_text(
        self,
        table: str,
        query: str,
        columns: List[str],
        limit: int = 20,
        filters: Optional[dict] = None,
    ) -> List[dict]:
        """
        Ranked search with plainto_tsquery over search_vector.

        Tables without a search_vector column fall back to ILIKE on the
        given columns, newest first.
        """
        filters = filters or {}
        filter_sql = [f"{column} = ${i + 3}" for i, column in enumerate(filters)]
        filter_args = list(filters.values())

        fts_where = " AND ".join(filter_sql + ["search_vector @@ plainto_tsquery('english', $1)"])
        try:
            return await self.fetch(
                f"""
                SELECT *, ts_rank(search_vector, plainto_tsquery('english', $1)) AS _rank
                FROM {table}
                WHERE {fts_where}
                ORDER BY _rank DESC, created_at DESC
                LIMIT $2
                """,
                query, limit, *filter_args,
            )
        except asyncpg.UndefinedColumnError as e:
            logger.debug(f"No search_vector on {table}, using ILIKE: {e}")

        matches = " OR ".join(f"{col} ILIKE $1 {LIKE_ESCAPE}" for col in columns)
        ilike_where = " AND ".join(filter_sql + [f"({matches})"])
        return await self.fetch(
            f"SELECT * FROM {table} WHERE {ilike_where} ORDER BY created_at DESC LIMIT $2",
            self.like_pattern(query), limit, *filter_args,
        )

    async def ensure_schema(self) -> None:
        """Create the todopro schema if it doesn't exist."""
        await self.execute("CREATE SCHEMA IF NOT EXISTS todopro")
