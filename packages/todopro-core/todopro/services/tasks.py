"""
Task Store for TodoPro.

Durable task persistence with support for both PostgreSQL and SQLite.
This is the authoritative copy of every task; the in-memory index in
todopro.services.index is derived from it.
"""

import json
import logging
from datetime import datetime
from typing import Any

from todopro.db import get_adapter
from todopro.db.interface import LIKE_ESCAPE
from todopro.errors import ValidationError
from todopro.models.task import (
    FLAG_BITS,
    PRIORITY_RANK,
    TASK_PRIORITIES,
    TASK_STATUSES,
    Task,
    parse_datetime,
    utcnow,
)

logger = logging.getLogger(__name__)

# Fields a caller may change after creation
UPDATABLE_FIELDS = (
    "title",
    "description",
    "status",
    "priority",
    "tags",
    "due_date",
    "category",
    "estimated_time",
    "actual_time",
    "flags",
    "dependencies",
)

CREATE_FIELDS = UPDATABLE_FIELDS + ("id", "user_id")

_COLUMNS = (
    "id", "user_id", "title", "description", "status", "priority", "tags",
    "due_date", "category", "estimated_time", "actual_time", "flags",
    "dependencies", "created_at", "updated_at",
)

_PRIORITY_ORDER_SQL = (
    "CASE priority "
    + " ".join(f"WHEN '{name}' THEN {rank}" for name, rank in PRIORITY_RANK.items())
    + " ELSE 2 END"
)


def _require_str(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"Invalid {name}. Must be a string")
    return value.strip()


def _require_minutes(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"Invalid {name}. Must be a non-negative integer")
    return value


def _require_str_list(name: str, value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"Invalid {name}. Must be a list of strings")
    return [v.strip() for v in value]


def validate_fields(fields: dict, allowed: tuple = UPDATABLE_FIELDS) -> dict:
    """
    Check and normalize task fields the way the store's schema does.

    Args:
        fields: Field values keyed by Task attribute name
        allowed: Field names the caller may set

    Returns:
        New dict with normalized values

    Raises:
        ValidationError: On unknown fields or values breaking a field rule
    """
    unknown = sorted(set(fields) - set(allowed))
    if unknown:
        raise ValidationError(f"Unknown or read-only task fields: {', '.join(unknown)}")

    cleaned = {}
    for name, value in fields.items():
        if name == "title":
            value = _require_str(name, value)
            if not value:
                raise ValidationError("Task title is required")
        elif name in ("description", "category"):
            value = _require_str(name, value)
        elif name in ("id", "user_id"):
            value = _require_str(name, value)
            if not value:
                raise ValidationError(f"Invalid {name}. Must not be empty")
        elif name == "status":
            if value not in TASK_STATUSES:
                raise ValidationError(f"Invalid status. Must be one of: {', '.join(TASK_STATUSES)}")
        elif name == "priority":
            if value not in TASK_PRIORITIES:
                raise ValidationError(f"Invalid priority. Must be one of: {', '.join(TASK_PRIORITIES)}")
        elif name in ("tags", "dependencies"):
            value = _require_str_list(name, value)
        elif name == "due_date":
            try:
                value = parse_datetime(value)
            except (TypeError, ValueError, AttributeError) as e:
                raise ValidationError(f"Invalid due_date: {value!r}") from e
        elif name in ("estimated_time", "actual_time"):
            value = _require_minutes(name, value)
        elif name == "flags":
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < (1 << FLAG_BITS):
                raise ValidationError(f"Invalid flags. Must be an unsigned {FLAG_BITS}-bit integer")
        cleaned[name] = value
    return cleaned


class TaskStore:
    """
    Durable store for tasks.

    Provides CRUD and search operations that work across PostgreSQL and SQLite.
    """

    def __init__(self, adapter=None):
        """
        Initialize task store.

        Args:
            adapter: Optional DatabaseAdapter. If not provided, uses global adapter.
        """
        self._adapter = adapter

    @property
    def adapter(self):
        """Get the database adapter."""
        if self._adapter is None:
            self._adapter = get_adapter()
        return self._adapter

    def _table_name(self) -> str:
        """Get the full table name."""
        if self.adapter.supports_fts:  # PostgreSQL
            return "todopro.tasks"
        return "tasks"  # SQLite

    def _to_db(self, column: str, value: Any) -> Any:
        """Convert a Task attribute to the adapter's column representation."""
        if column in ("tags", "dependencies"):
            return list(value) if self.adapter.supports_arrays else json.dumps(list(value), ensure_ascii=False)
        if isinstance(value, datetime) and self.adapter.placeholder_style == "qmark":
            return value.isoformat()
        return value

    async def _fetch_tasks(self, query: str, *args) -> list[Task]:
        rows = await self.adapter.fetch(self.adapter.format_query(query), *args)
        return [Task.from_dict(row) for row in rows]

    async def create(self, data: dict) -> Task:
        """
        Validate and insert a new task.

        Args:
            data: Task fields; title and user_id are required

        Returns:
            Created Task object

        Raises:
            ValidationError: If a field breaks the schema rules
            ConflictError: If a task with the given id already exists
        """
        fields = validate_fields(data, CREATE_FIELDS)
        if "title" not in fields:
            raise ValidationError("Task title is required")
        if "user_id" not in fields:
            raise ValidationError("Task user_id is required")

        task = Task(**fields)

        table = self._table_name()
        placeholders = ", ".join(f"${i + 1}" for i in range(len(_COLUMNS)))
        values = [self._to_db(col, getattr(task, col)) for col in _COLUMNS]

        await self.adapter.execute(
            self.adapter.format_query(
                f"INSERT INTO {table} ({', '.join(_COLUMNS)}) VALUES ({placeholders})"
            ),
            *values,
        )

        logger.info(f"Created task: {task.id} - {task.title}")
        return task

    async def find_by_id(self, task_id: str) -> Task | None:
        """Get a task by ID."""
        table = self._table_name()
        row = await self.adapter.fetchrow(
            self.adapter.format_query(f"SELECT * FROM {table} WHERE id = $1"),
            task_id,
        )
        if row:
            return Task.from_dict(row)
        return None

    async def find_by_user(
        self,
        user_id: str,
        oldest_first: bool = False,
        status: str | None = None,
        priority: str | None = None,
    ) -> list[Task]:
        """
        All of a user's tasks, newest first unless oldest_first.

        Args:
            user_id: Owner
            oldest_first: Order by creation ascending
            status: Only tasks with this status
            priority: Only tasks with this priority

        Raises:
            ValidationError: If status or priority is not a known value
        """
        filters = {"user_id": user_id}
        filters.update(validate_fields(
            {name: value for name, value in (("status", status), ("priority", priority)) if value is not None}
        ))

        table = self._table_name()
        where = " AND ".join(f"{col} = ${i + 1}" for i, col in enumerate(filters))
        direction = "ASC" if oldest_first else "DESC"
        return await self._fetch_tasks(
            f"SELECT * FROM {table} WHERE {where} ORDER BY created_at {direction}",
            *filters.values(),
        )

    async def find_all_ids(self) -> list[str]:
        """Ids of every stored task, oldest first."""
        table = self._table_name()
        rows = await self.adapter.fetch(f"SELECT id FROM {table} ORDER BY created_at ASC")
        return [row["id"] for row in rows]

    async def update(self, task_id: str, fields: dict) -> Task | None:
        """
        Apply a partial update.

        Args:
            task_id: Task ID
            fields: Fields to replace

        Returns:
            Updated Task or None if not found
        """
        fields = validate_fields(fields)

        if not fields:
            return await self.find_by_id(task_id)

        columns = list(fields) + ["updated_at"]
        params = [self._to_db(col, fields[col]) for col in fields]
        params.append(self._to_db("updated_at", utcnow()))
        params.append(task_id)

        table = self._table_name()
        set_clause = ", ".join(f"{col} = ${i + 1}" for i, col in enumerate(columns))
        status = await self.adapter.execute(
            self.adapter.format_query(
                f"UPDATE {table} SET {set_clause} WHERE id = ${len(params)}"
            ),
            *params,
        )

        if self.adapter.rowcount(status) == 0:
            return None

        logger.info(f"Updated task: {task_id} ({', '.join(fields)})")
        return await self.find_by_id(task_id)

    async def delete(self, task_id: str) -> bool:
        """Permanently delete a task."""
        table = self._table_name()
        status = await self.adapter.execute(
            self.adapter.format_query(f"DELETE FROM {table} WHERE id = $1"),
            task_id,
        )
        deleted = self.adapter.rowcount(status) > 0
        if deleted:
            logger.info(f"Deleted task: {task_id}")
        return deleted

    async def full_text_search(self, user_id: str, query: str, limit: int = 50) -> list[Task]:
        """
        Ranked search over title and description.

        Args:
            user_id: Owner to restrict results to
            query: Search query
            limit: Max results

        Returns:
            Matching tasks, most relevant first
        """
        rows = await self.adapter.search_text(
            table=self._table_name(),
            query=query,
            columns=["title", "description"],
            limit=limit,
            filters={"user_id": user_id},
        )
        return [Task.from_dict(row) for row in rows]

    async def substring_search(self, user_id: str, query: str, limit: int = 50) -> list[Task]:
        """Case-insensitive substring match on title, description and tags."""
        table = self._table_name()
        if self.adapter.supports_arrays:
            op, tags_expr = "ILIKE", "array_to_string(tags, ' ')"
        else:
            op, tags_expr = "LIKE", "tags"

        pattern = self.adapter.like_pattern(query)
        return await self._fetch_tasks(
            f"""
            SELECT * FROM {table}
            WHERE user_id = $1
              AND (title {op} $2 {LIKE_ESCAPE} OR description {op} $3 {LIKE_ESCAPE}
                   OR {tags_expr} {op} $4 {LIKE_ESCAPE})
            ORDER BY created_at DESC
            LIMIT $5
            """,
            user_id, pattern, pattern, pattern, limit,
        )

    async def distinct_categories(self, user_id: str) -> list[str]:
        """Non-empty categories used by a user's tasks, sorted."""
        table = self._table_name()
        rows = await self.adapter.fetch(
            self.adapter.format_query(
                f"SELECT DISTINCT category FROM {table} "
                f"WHERE user_id = $1 AND category <> '' ORDER BY category"
            ),
            user_id,
        )
        return [row["category"] for row in rows]

    async def find_next_important(self, user_id: str) -> Task | None:
        """Highest-priority, earliest-due task of a user that is not completed."""
        table = self._table_name()
        row = await self.adapter.fetchrow(
            self.adapter.format_query(
                f"""
                SELECT * FROM {table}
                WHERE user_id = $1 AND status <> 'Completed'
                ORDER BY {_PRIORITY_ORDER_SQL} DESC, due_date IS NULL, due_date ASC
                LIMIT 1
                """
            ),
            user_id,
        )
        if row:
            return Task.from_dict(row)
        return None
