"""
Abstract database adapter interface.

Supports both PostgreSQL and SQLite with feature detection for graceful degradation.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Optional

# Backslash escapes % and _ in patterns built by like_pattern()
LIKE_ESCAPE = "ESCAPE '\\'"


class DatabaseAdapter(ABC):
    """
    Abstract base class for database adapters.

    Implementations must support:
    - Basic CRUD operations (execute, fetch, fetchrow, fetchval)
    - Feature detection (supports_fts, supports_arrays)
    - Ranked text search with graceful degradation
    """

    @abstractmethod
    async def connect(self) -> None:
        """Initialize connection/pool."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close connection/pool."""
        pass

    @abstractmethod
    async def execute(self, query: str, *args) -> str:
        """
        Execute a query and return status.

        Args:
            query: SQL query with $1, $2 placeholders
            *args: Query parameters

        Returns:
            Status string (e.g., "DELETE 1")

        Raises:
            ConflictError: If a unique constraint is violated
        """
        pass

    @abstractmethod
    async def fetch(self, query: str, *args) -> list[dict]:
        """Fetch multiple rows as list of dicts."""
        pass

    @abstractmethod
    async def fetchrow(self, query: str, *args) -> dict | None:
        """Fetch single row as dict, or None if no results."""
        pass

    @abstractmethod
    async def fetchval(self, query: str, *args) -> Any:
        """Fetch the first column of the first row, or None."""
        pass

    @property
    @abstractmethod
    def supports_fts(self) -> bool:
        """Does this adapter support full-text search (tsvector/tsquery)?"""
        pass

    @property
    @abstractmethod
    def supports_arrays(self) -> bool:
        """Does this adapter support native array columns?"""
        pass

    @property
    @abstractmethod
    def placeholder_style(self) -> str:
        """
        Return the placeholder style for this adapter.

        Returns:
            "dollar" for PostgreSQL ($1, $2, ...)
            "qmark" for SQLite (?, ?, ...)
        """
        pass

    @abstractmethod
    async def search_text(
        self,
        table: str,
        query: str,
        columns: list[str],
        limit: int = 20,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[dict]:
        """
        Ranked full-text search with graceful degradation.

        On PostgreSQL: Uses tsvector/tsquery with ts_rank
        On SQLite: Falls back to per-term LIKE matching ranked by hit count

        Args:
            table: Table name to search
            query: Search query string
            columns: Columns to search in
            limit: Maximum results
            filters: Column equality conditions ANDed onto the search

        Returns:
            List of matching rows, most relevant first
        """
        pass

    @staticmethod
    def like_pattern(term: str) -> str:
        """
        Substring pattern for LIKE / ILIKE with term matched literally.

        Pair with LIKE_ESCAPE so % and _ in user input are not wildcards.
        """
        escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return f"%{escaped}%"

    def format_query(self, query: str) -> str:
        """
        Convert query placeholders to the adapter's style.

        Input uses $1, $2 style (PostgreSQL), each placeholder appearing
        once and in order. For SQLite, converts to ? style.
        """
        if self.placeholder_style == "dollar":
            return query
        return re.sub(r'\$\d+', '?', query)

    @staticmethod
    def rowcount(status: str) -> int:
        """Number of affected rows from a status string like "UPDATE 3"."""
        try:
            return int(status.rsplit(" ", 1)[-1])
        except (ValueError, AttributeError):
            return 0

    async def ensure_schema(self) -> None:
        """
        Create schema if needed (PostgreSQL only).
        Default implementation does nothing.
        """
        pass
