"""
Tests for adapter construction and the shared index wiring.
"""

import pytest


@pytest.fixture
def fresh_factory():
    """Factory module with no shared adapter before or after the test."""
    from todopro.db import factory

    factory.reset_adapter()
    yield factory
    factory.reset_adapter()


class TestBuildAdapter:
    """Tests for build_adapter()."""

    def test_sqlite(self, tmp_path):
        from todopro.config import DatabaseConfig
        from todopro.db.factory import build_adapter
        from todopro.db.sqlite import SQLiteAdapter

        adapter = build_adapter(DatabaseConfig(type="SQLite", sqlite_path=str(tmp_path / "t.db")))

        assert isinstance(adapter, SQLiteAdapter)

    def test_postgres(self):
        pytest.importorskip("asyncpg")
        from todopro.config import DatabaseConfig
        from todopro.db.factory import build_adapter
        from todopro.db.postgres import PostgresAdapter

        adapter = build_adapter(DatabaseConfig(type="postgresql", postgres_url="postgresql://localhost/todopro"))

        assert isinstance(adapter, PostgresAdapter)
        assert adapter.placeholder_style == "dollar"

    def test_postgres_without_url(self):
        from todopro.config import DatabaseConfig
        from todopro.db.factory import build_adapter
        from todopro.errors import UpstreamError

        with pytest.raises(UpstreamError, match="no URL"):
            build_adapter(DatabaseConfig(type="postgres"))

    def test_unknown_type(self):
        from todopro.config import DatabaseConfig
        from todopro.db.factory import build_adapter
        from todopro.errors import UpstreamError

        with pytest.raises(UpstreamError, match="Unknown database type 'mongo'"):
            build_adapter(DatabaseConfig(type="mongo"))


class TestSharedAdapter:
    """Tests for get_adapter(), open_index() and close_adapter()."""

    def test_get_adapter_is_shared(self, fresh_factory, tmp_path):
        from todopro.config import DatabaseConfig, TodoproConfig

        config = TodoproConfig(database=DatabaseConfig(sqlite_path=str(tmp_path / "t.db")))

        first = fresh_factory.get_adapter(config)

        assert fresh_factory.get_adapter() is first

    @pytest.mark.asyncio
    async def test_open_index(self, fresh_factory, tmp_path):
        from todopro.config import DatabaseConfig, IndexSettings, TodoproConfig
        from todopro.services import TaskIndex

        config = TodoproConfig(
            database=DatabaseConfig(sqlite_path=str(tmp_path / "t.db")),
            index=IndexSettings(search_limit=5),
        )

        index = await fresh_factory.open_index(config)
        try:
            assert isinstance(index, TaskIndex)
            assert index.settings.search_limit == 5
            assert index.store.adapter is fresh_factory.get_adapter()

            task = await index.create({"title": "Wired", "user_id": "u1"})
            assert (await index.get(task.id)).title == "Wired"
        finally:
            await fresh_factory.close_adapter()

        assert fresh_factory._adapter is None
