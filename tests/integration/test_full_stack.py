"""
Integration tests for the todopro MCP server.

These tests verify the full stack works together:
- MCP server registers tools
- Tools can be called and return valid results
- Database operations work end-to-end through the task index
"""

import pytest


EXPECTED_TOOLS = {
    "task_create", "task_show", "task_list", "task_update", "task_delete",
    "task_search", "task_autocomplete", "task_sorted", "task_next",
    "task_dependencies", "task_group", "task_related", "task_history",
    "task_analytics", "task_undo", "task_flag", "task_categories",
    "todopro_health",
}


@pytest.fixture
async def server(tmp_path, monkeypatch):
    """MCP server module bound to a fresh SQLite database."""
    from todopro.db import reset_adapter
    from todopro_mcp import server as server_module

    monkeypatch.delenv("TODOPRO_DATABASE_URL", raising=False)
    monkeypatch.setenv("TODOPRO_SQLITE_PATH", str(tmp_path / "todopro.db"))
    monkeypatch.setenv("TODOPRO_USER_ID", "tester")
    reset_adapter()

    yield server_module

    await server_module.shutdown()


class TestMCPServerStartup:
    """Test that the MCP server starts correctly."""

    @pytest.mark.asyncio
    async def test_server_has_tools(self):
        """Test server registers expected tools."""
        from todopro_mcp.server import mcp

        tool_names = {tool.name for tool in await mcp.list_tools()}

        assert EXPECTED_TOOLS <= tool_names

    @pytest.mark.asyncio
    async def test_health(self, server):
        result = await server.todopro_health()

        assert result["status"] == "healthy"
        assert result["database_type"] == "sqlite"
        assert result["user_id"] == "tester"


class TestTaskTools:
    """Test task tools end-to-end against SQLite."""

    @pytest.mark.asyncio
    async def test_create_show_update_delete(self, server):
        created = await server.task_create(title="Pay rent", tags=["urgent", "home"], priority="High")

        assert created["user_id"] == "tester"
        task_id = created["id"]

        shown = await server.task_show(task_id)
        assert shown["title"] == "Pay rent"

        updated = await server.task_update(task_id, status="In Progress")
        assert updated["status"] == "In Progress"
        assert updated["priority"] == "High"

        suggestions = await server.task_autocomplete("ur")
        assert "urgent" in suggestions["suggestions"]

        deleted = await server.task_delete(task_id)
        assert deleted == {"deleted": True, "task_id": task_id}

        assert await server.task_show(task_id) == {"error": f"Task not found: {task_id}"}

    @pytest.mark.asyncio
    async def test_unknown_ids(self, server):
        assert "error" in await server.task_update("nope", title="x")
        assert "error" in await server.task_delete("nope")
        assert "error" in await server.task_flag("nope", 1)

    @pytest.mark.asyncio
    async def test_validation_errors_are_returned(self, server):
        result = await server.task_create(title="Bad", priority="Urgent")

        assert "Invalid priority" in result["error"]

    @pytest.mark.asyncio
    async def test_list_search_and_sort(self, server):
        await server.task_create(title="Write report", priority="Low", due_date="2024-03-01")
        await server.task_create(title="Review report", priority="Critical", due_date="2024-04-01")
        await server.task_create(title="Someone else", user_id="other")

        listed = await server.task_list()
        assert listed["count"] == 2

        found = await server.task_search("report")
        assert found["count"] == 2

        by_priority = await server.task_sorted("priority")
        assert [t["priority"] for t in by_priority["tasks"]] == ["Critical", "Low"]

        by_deadline = await server.task_sorted("deadline")
        assert [t["title"] for t in by_deadline["tasks"]] == ["Write report", "Review report"]

        assert "error" in await server.task_sorted("alphabetical")

        nxt = await server.task_next()
        assert nxt["task"]["title"] == "Review report"

    @pytest.mark.asyncio
    async def test_flags_groups_and_dependencies(self, server):
        first = await server.task_create(title="First")
        second = await server.task_create(title="Second", dependencies=[first["id"]])

        flagged = await server.task_flag(first["id"], 1)
        assert flagged["flags"] == 2
        assert flagged["flag_set"] is True
        assert "error" in await server.task_flag(first["id"], 40)

        await server.task_group([first["id"], second["id"]])
        assert (await server.task_related(first["id"], second["id"]))["related"] is True

        order = (await server.task_dependencies())["order"]
        assert order.index(first["id"]) < order.index(second["id"])

    @pytest.mark.asyncio
    async def test_history_undo_analytics_categories(self, server):
        created = await server.task_create(title="Tracked", category="Work")
        await server.task_update(created["id"], status="Completed", actual_time=45)

        history = await server.task_history()
        assert [h["action"] for h in history["history"]] == ["created", "updated"]

        undone = await server.task_undo()
        assert undone["command"]["action"] == "UPDATE"

        report = await server.task_analytics()
        assert report["completed_tasks"] == 1
        assert report["avg"] == 45

        categories = await server.task_categories()
        assert categories["categories"] == ["Work"]

    @pytest.mark.asyncio
    async def test_rejected_inputs_return_errors(self, server):
        created = await server.task_create(title="Lonely")

        assert "error" in await server.task_group([created["id"]])
        assert "error" in await server.task_search("")
        assert "error" in await server.task_search("   ")
        assert "error" in await server.task_list(status="Someday")

    @pytest.mark.asyncio
    async def test_list_filters(self, server):
        done = await server.task_create(title="Done", status="Completed")
        await server.task_create(title="Open", priority="High")

        completed = await server.task_list(status="Completed")
        high = await server.task_list(priority="High")

        assert [t["id"] for t in completed["tasks"]] == [done["id"]]
        assert [t["title"] for t in high["tasks"]] == ["Open"]
