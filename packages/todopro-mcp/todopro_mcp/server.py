"""
TodoPro MCP Server

Exposes the task index as MCP tools, backed by PostgreSQL or SQLite.
"""

import asyncio
import logging
import sys
from typing import Optional, List

from mcp.server.fastmcp import FastMCP

from todopro.errors import TodoproError
from todopro.models.task import utcnow

# Initialize FastMCP server
mcp = FastMCP("todopro")

logger = logging.getLogger(__name__)

# Process-wide state, built once by ensure_initialized()
_index = None
_config = None


async def ensure_initialized():
    """Connect the database, run migrations and build the task index."""
    global _index, _config
    if _index is not None:
        return _index

    from todopro.config import load_config
    from todopro.db import open_index

    config = load_config()
    _index = await open_index(config)
    _config = config
    logger.info("TodoPro initialized")
    return _index


async def shutdown():
    """Close the database and drop the task index."""
    global _index, _config
    from todopro.db import close_adapter

    await close_adapter()
    _index = None
    _config = None


def _user(user_id: Optional[str]) -> Optional[str]:
    """Explicit user id, else the configured default."""
    if user_id:
        return user_id
    return _config.user_id if _config else None


def _no_user() -> dict:
    return {"error": "No user id given and identity.user_id is not configured"}


def _not_found(task_id: str) -> dict:
    return {"error": f"Task not found: {task_id}"}


# =============================================================================
# TASK TOOLS
# =============================================================================

@mcp.tool()
async def task_create(
    title: str,
    description: str = "",
    priority: str = "Medium",
    status: str = "Pending",
    tags: Optional[List[str]] = None,
    due_date: Optional[str] = None,
    category: str = "General",
    estimated_time: int = 60,
    dependencies: Optional[List[str]] = None,
    user_id: Optional[str] = None,
) -> dict:
    """
    Create a new task.

    Args:
        title: Task title
        description: Detailed description
        priority: Low, Medium, High or Critical
        status: Pending, In Progress or Completed
        tags: List of tags
        due_date: ISO-8601 due date (defaults to one week from now)
        category: Category name
        estimated_time: Estimated minutes
        dependencies: Ids of tasks this one depends on
        user_id: Owner (defaults to identity.user_id)

    Returns:
        Created task details
    """
    index = await ensure_initialized()
    owner = _user(user_id)
    if not owner:
        return _no_user()

    data = {
        "user_id": owner,
        "title": title,
        "description": description,
        "priority": priority,
        "status": status,
        "tags": tags or [],
        "category": category,
        "estimated_time": estimated_time,
        "dependencies": dependencies or [],
    }
    if due_date:
        data["due_date"] = due_date

    try:
        task = await index.create(data)
    except TodoproError as e:
        return {"error": str(e)}
    return task.to_dict()


@mcp.tool()
async def task_show(task_id: str) -> dict:
    """
    Get detailed information about a task.

    Args:
        task_id: Task UUID

    Returns:
        Full task details
    """
    index = await ensure_initialized()
    task = await index.get(task_id)

    if not task:
        return _not_found(task_id)

    return task.to_dict()


@mcp.tool()
async def task_list(
    user_id: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
) -> dict:
    """
    List a user's tasks, newest first.

    Args:
        user_id: Owner (defaults to identity.user_id)
        status: Only tasks with this status
        priority: Only tasks with this priority

    Returns:
        List of tasks
    """
    index = await ensure_initialized()
    owner = _user(user_id)
    if not owner:
        return _no_user()

    try:
        tasks = await index.list_for_user(owner, status=status, priority=priority)
    except TodoproError as e:
        return {"error": str(e)}

    return {
        "tasks": [t.to_dict() for t in tasks],
        "count": len(tasks),
    }


@mcp.tool()
async def task_update(
    task_id: str,
    title: Optional[str] = None,
    description: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    tags: Optional[List[str]] = None,
    due_date: Optional[str] = None,
    category: Optional[str] = None,
    estimated_time: Optional[int] = None,
    actual_time: Optional[int] = None,
) -> dict:
    """
    Update an existing task. Only the given fields change.

    Args:
        task_id: Task UUID
        title: New title
        description: New description
        status: New status
        priority: New priority
        tags: New tags
        due_date: New ISO-8601 due date
        category: New category
        estimated_time: New estimate in minutes
        actual_time: Minutes actually spent

    Returns:
        Updated task details
    """
    index = await ensure_initialized()
    candidates = {
        "title": title,
        "description": description,
        "status": status,
        "priority": priority,
        "tags": tags,
        "due_date": due_date,
        "category": category,
        "estimated_time": estimated_time,
        "actual_time": actual_time,
    }
    fields = {name: value for name, value in candidates.items() if value is not None}

    try:
        task = await index.update(task_id, fields)
    except TodoproError as e:
        return {"error": str(e)}

    if not task:
        return _not_found(task_id)

    return task.to_dict()


@mcp.tool()
async def task_delete(task_id: str) -> dict:
    """
    Permanently delete a task.

    Args:
        task_id: Task UUID

    Returns:
        Deletion status
    """
    index = await ensure_initialized()
    if not await index.delete(task_id):
        return _not_found(task_id)
    return {"deleted": True, "task_id": task_id}


@mcp.tool()
async def task_search(query: str, user_id: Optional[str] = None) -> dict:
    """
    Search a user's tasks by title, description and tags.

    Args:
        query: Search query
        user_id: Owner (defaults to identity.user_id)

    Returns:
        Matching tasks, best matches first
    """
    index = await ensure_initialized()
    owner = _user(user_id)
    if not owner:
        return _no_user()

    try:
        tasks = await index.search(owner, query)
    except TodoproError as e:
        return {"error": str(e)}

    return {
        "tasks": [t.to_dict() for t in tasks],
        "count": len(tasks),
        "query": query,
    }


@mcp.tool()
async def task_autocomplete(prefix: str) -> dict:
    """
    Suggest recently used titles and tags starting with a prefix.

    Args:
        prefix: Text typed so far

    Returns:
        Up to 10 suggestions
    """
    index = await ensure_initialized()
    return {"prefix": prefix, "suggestions": index.autocomplete(prefix)}


@mcp.tool()
async def task_sorted(sort_by: str = "priority", user_id: Optional[str] = None) -> dict:
    """
    List a user's tasks sorted by priority or deadline.

    Args:
        sort_by: "priority" (highest first) or "deadline" (earliest first)
        user_id: Owner (defaults to identity.user_id)

    Returns:
        Sorted tasks
    """
    index = await ensure_initialized()
    owner = _user(user_id)
    if not owner:
        return _no_user()

    if sort_by == "priority":
        tasks = await index.sort_by_priority(owner)
    elif sort_by == "deadline":
        tasks = await index.sort_by_deadline(owner)
    else:
        return {"error": "sort_by must be 'priority' or 'deadline'"}

    return {
        "tasks": [t.to_dict() for t in tasks],
        "count": len(tasks),
        "sort_by": sort_by,
    }


@mcp.tool()
async def task_next(user_id: Optional[str] = None) -> dict:
    """
    Get the most important task that is not completed.

    Args:
        user_id: Owner (defaults to identity.user_id)

    Returns:
        The task, or {"task": None} when nothing is open
    """
    index = await ensure_initialized()
    owner = _user(user_id)
    if not owner:
        return _no_user()

    task = await index.next_important(owner)
    return {"task": task.to_dict() if task else None}


@mcp.tool()
async def task_dependencies() -> dict:
    """
    Order all task ids so prerequisites come before their dependents.

    Returns:
        Ordered task ids
    """
    index = await ensure_initialized()
    order = await index.dependency_order()
    return {"order": order, "count": len(order)}


@mcp.tool()
async def task_group(task_ids: List[str]) -> dict:
    """
    Mark a set of tasks as related to each other.

    Args:
        task_ids: Ids to group together (at least two)

    Returns:
        Grouping status
    """
    index = await ensure_initialized()
    try:
        index.group(task_ids)
    except TodoproError as e:
        return {"error": str(e)}
    return {"grouped": task_ids}


@mcp.tool()
async def task_related(first_id: str, second_id: str) -> dict:
    """
    Check whether two tasks were grouped together.

    Args:
        first_id: Task UUID
        second_id: Task UUID

    Returns:
        {"related": bool}
    """
    index = await ensure_initialized()
    return {"related": index.related(first_id, second_id)}


@mcp.tool()
async def task_history() -> dict:
    """
    Activity recorded by this server since it started, oldest first.

    Returns:
        Activity records
    """
    index = await ensure_initialized()
    records = index.history()
    return {"history": [r.to_dict() for r in records], "count": len(records)}


@mcp.tool()
async def task_analytics(user_id: Optional[str] = None) -> dict:
    """
    Productivity report: status counts, overdue tasks and time trend.

    Args:
        user_id: Owner (defaults to identity.user_id)

    Returns:
        Report dict
    """
    index = await ensure_initialized()
    owner = _user(user_id)
    if not owner:
        return _no_user()
    return await index.productivity_analysis(owner)


@mcp.tool()
async def task_undo() -> dict:
    """
    Pop the last recorded command.

    The command is reported, not reversed.

    Returns:
        The command record, or {"command": None}
    """
    index = await ensure_initialized()
    record = index.undo_last()
    return {"command": record.to_dict() if record else None}


@mcp.tool()
async def task_flag(task_id: str, position: int, value: bool = True) -> dict:
    """
    Set or clear one flag bit on a task (1 = starred, 2 = archived).

    Args:
        task_id: Task UUID
        position: Bit position, 0-31
        value: True to set, False to clear

    Returns:
        Updated task details
    """
    index = await ensure_initialized()
    try:
        task = await index.set_flag(task_id, position, value)
    except TodoproError as e:
        return {"error": str(e)}

    if not task:
        return _not_found(task_id)

    result = task.to_dict()
    result["flag_set"] = index.is_flagged(task, position)
    return result


@mcp.tool()
async def task_categories(user_id: Optional[str] = None) -> dict:
    """
    Categories used by a user's tasks.

    Args:
        user_id: Owner (defaults to identity.user_id)

    Returns:
        Sorted category names
    """
    index = await ensure_initialized()
    owner = _user(user_id)
    if not owner:
        return _no_user()
    return {"categories": await index.categories(owner)}


# =============================================================================
# UTILITY TOOLS
# =============================================================================

@mcp.tool()
async def todopro_health() -> dict:
    """
    Check database connectivity and index state.

    Returns:
        Health status including database type and structure sizes
    """
    index = await ensure_initialized()
    adapter = index.store.adapter

    try:
        result = await adapter.fetchval("SELECT 1")
        connected = result == 1
    except Exception as e:
        connected = False
        logger.error(f"Health check failed: {e}")

    return {
        "status": "healthy" if connected else "unhealthy",
        "database_type": "postgres" if adapter.supports_fts else "sqlite",
        "supports_fts": adapter.supports_fts,
        "user_id": _config.user_id if _config else None,
        "index": index.stats(),
        "checked_at": utcnow().isoformat(),
    }


# =============================================================================
# CLI ENTRY POINT
# =============================================================================

def main():
    """Main entry point for todopro-mcp command."""
    import argparse

    from todopro.config import load_config

    parser = argparse.ArgumentParser(description="TodoPro MCP Server")
    parser.add_argument("command", nargs="?", default="serve", help="Command to run (serve, migrate)")
    args = parser.parse_args()

    # stdout carries the MCP protocol, so logs go to stderr
    logging.basicConfig(
        level=load_config().log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "migrate":
        async def do_migrate():
            await ensure_initialized()
            await shutdown()
            print("Migrations complete")

        asyncio.run(do_migrate())
    else:
        mcp.run()


if __name__ == "__main__":
    main()
