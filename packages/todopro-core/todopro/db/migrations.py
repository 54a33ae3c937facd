"""
SQL migration runner.

Migration files live in todopro/migrations/<postgres|sqlite>/NNN_name.sql
and are applied in name order. Applied versions are recorded in
schema_migrations.
"""

import logging
from pathlib import Path

from todopro.db.interface import DatabaseAdapter
from todopro.models.task import utcnow

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent.parent / "migrations"


def _split_statements(sql: str) -> list[str]:
    """Drop comment lines and split a script on semicolons."""
    lines = [line for line in sql.splitlines() if not line.strip().startswith("--")]
    return [s.strip() for s in "\n".join(lines).split(";") if s.strip()]


async def run_migrations(adapter: DatabaseAdapter) -> list[str]:
    """
    Run pending database migrations.

    Args:
        adapter: Connected DatabaseAdapter

    Returns:
        File names of the migrations applied by this call
    """
    await adapter.ensure_schema()

    if adapter.supports_fts:  # PostgreSQL
        table = "todopro.schema_migrations"
        migrations_dir = MIGRATIONS_DIR / "postgres"
    else:  # SQLite
        table = "schema_migrations"
        migrations_dir = MIGRATIONS_DIR / "sqlite"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return []

    await adapter.execute(
        f"CREATE TABLE IF NOT EXISTS {table} (version TEXT PRIMARY KEY, applied_at TEXT NOT NULL)"
    )
    applied_versions = {row["version"] for row in await adapter.fetch(f"SELECT version FROM {table}")}

    applied = []
    for sql_file in sorted(migrations_dir.glob("*.sql")):
        version = sql_file.name.split("_")[0]
        if version in applied_versions:
            continue

        logger.info(f"Running migration: {sql_file.name}")
        for statement in _split_statements(sql_file.read_text()):
            try:
                await adapter.execute(statement)
            except Exception as e:
                logger.error(f"Migration error in {sql_file.name}: {e}")
                raise

        await adapter.execute(
            adapter.format_query(f"INSERT INTO {table} (version, applied_at) VALUES ($1, $2)"),
            version,
            utcnow().isoformat(),
        )
        applied.append(sql_file.name)

    return applied
