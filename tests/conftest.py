"""
Shared fixtures: import paths, a migrated SQLite database, sample data.
"""

import sys
import tempfile
from pathlib import Path

import pytest

packages_dir = Path(__file__).parent.parent / "packages"
sys.path.insert(0, str(packages_dir / "todopro-core"))
sys.path.insert(0, str(packages_dir / "todopro-mcp"))


@pytest.fixture
async def migrated_adapter():
    """Connected SQLiteAdapter on a throwaway file with every migration applied."""
    from todopro.db.migrations import run_migrations
    from todopro.db.sqlite import SQLiteAdapter

    with tempfile.TemporaryDirectory() as tmpdir:
        adapter = SQLiteAdapter(str(Path(tmpdir) / "test.db"))
        await adapter.connect()
        await run_migrations(adapter)

        yield adapter

        await adapter.close()


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory."""
    config_dir = tmp_path / ".todopro"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def sample_task_data():
    """Fields for a typical task owned by user-1."""
    return {
        "user_id": "user-1",
        "title": "Test Task",
        "description": "A test task description",
        "status": "Pending",
        "priority": "Medium",
        "tags": ["test", "sample"],
    }
