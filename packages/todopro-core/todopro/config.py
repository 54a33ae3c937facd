"""
TodoPro Configuration

Loads settings from ~/.todopro/config.yaml with environment variable overrides.
Supports both PostgreSQL and SQLite database configurations.
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional
import os
import logging

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".todopro"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

DEFAULT_SQLITE_PATH = "~/.todopro/todopro.db"


@dataclass
class DatabaseConfig:
    """Database configuration settings."""

    type: str = "sqlite"  # "sqlite" or "postgres"
    sqlite_path: str = DEFAULT_SQLITE_PATH
    postgres_url: Optional[str] = None


@dataclass
class IdentityConfig:
    """Default user the tool layer acts for."""

    user_id: Optional[str] = None


@dataclass
class IndexSettings:
    """Sizing of the in-memory task index."""

    cache_buckets: int = 16
    suggestion_limit: int = 10
    search_limit: int = 50


@dataclass
class TodoproConfig:
    """
    Complete TodoPro configuration.

    Loaded from ~/.todopro/config.yaml with environment variable overrides.
    """

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    identity: IdentityConfig = field(default_factory=IdentityConfig)
    index: IndexSettings = field(default_factory=IndexSettings)
    log_level: str = "INFO"

    @property
    def user_id(self) -> Optional[str]:
        return self.identity.user_id

    def to_dict(self) -> dict:
        """Convert to dictionary for display (masks secrets)."""
        result = asdict(self)

        # Mask database URL
        if result.get("database", {}).get("postgres_url"):
            url = result["database"]["postgres_url"]
            result["database"]["postgres_url"] = url[:30] + "..." if len(url) > 30 else "***"

        return result


def _parse_database_config(data: dict) -> DatabaseConfig:
    """Parse database configuration from YAML data."""
    db_data = data.get("database", {})

    db_type = db_data.get("type", "sqlite")

    sqlite_config = db_data.get("sqlite", {})
    sqlite_path = sqlite_config.get("path", DEFAULT_SQLITE_PATH)

    postgres_config = db_data.get("postgres", {})
    postgres_url = postgres_config.get("url")

    # URL may be given as the name of an environment variable
    url_env = postgres_config.get("url_env")
    if url_env and not postgres_url:
        postgres_url = os.environ.get(url_env)

    return DatabaseConfig(
        type=db_type,
        sqlite_path=sqlite_path,
        postgres_url=postgres_url,
    )


def _parse_identity_config(data: dict) -> IdentityConfig:
    identity_data = data.get("identity", {})
    return IdentityConfig(user_id=identity_data.get("user_id"))


def _parse_index_settings(data: dict) -> IndexSettings:
    """Parse index sizing from YAML data."""
    index_data = data.get("index", {})
    defaults = IndexSettings()

    return IndexSettings(
        cache_buckets=int(index_data.get("cache_buckets", defaults.cache_buckets)),
        suggestion_limit=int(index_data.get("suggestion_limit", defaults.suggestion_limit)),
        search_limit=int(index_data.get("search_limit", defaults.search_limit)),
    )


def load_config(config_path: Optional[Path] = None) -> TodoproConfig:
    """
    Load configuration from file with environment variable overrides.

    Args:
        config_path: Optional path to config file. Defaults to ~/.todopro/config.yaml

    Returns:
        TodoproConfig instance
    """
    config_file = config_path or CONFIG_FILE
    config = TodoproConfig()

    if config_file.exists():
        try:
            with open(config_file, 'r') as f:
                data = yaml.safe_load(f) or {}

            config.database = _parse_database_config(data)
            config.identity = _parse_identity_config(data)
            config.index = _parse_index_settings(data)
            config.log_level = str(data.get("log_level", config.log_level)).upper()

        except yaml.YAMLError as e:
            logger.warning(f"Could not parse config file at {config_file}: {e}")
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Unexpected error loading config from {config_file}: {e}")

    # Environment variable overrides
    if os.environ.get("TODOPRO_DATABASE_URL"):
        config.database.type = "postgres"
        config.database.postgres_url = os.environ["TODOPRO_DATABASE_URL"]
    elif os.environ.get("TODOPRO_SQLITE_PATH"):
        config.database.type = "sqlite"
        config.database.sqlite_path = os.environ["TODOPRO_SQLITE_PATH"]

    if os.environ.get("TODOPRO_USER_ID"):
        config.identity.user_id = os.environ["TODOPRO_USER_ID"]

    if os.environ.get("TODOPRO_LOG_LEVEL"):
        config.log_level = os.environ["TODOPRO_LOG_LEVEL"].upper()

    return config


def save_config(config: TodoproConfig, config_path: Optional[Path] = None) -> None:
    """
    Save configuration to file.

    Args:
        config: TodoproConfig instance to save
        config_path: Optional path to config file. Defaults to ~/.todopro/config.yaml
    """
    config_file = config_path or CONFIG_FILE
    config_file.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "database": {
            "type": config.database.type,
        },
        "identity": {},
        "index": asdict(config.index),
        "log_level": config.log_level,
    }

    if config.database.type == "sqlite":
        data["database"]["sqlite"] = {"path": config.database.sqlite_path}
    elif config.database.postgres_url:
        data["database"]["postgres"] = {"url": config.database.postgres_url}

    if config.identity.user_id:
        data["identity"]["user_id"] = config.identity.user_id

    with open(config_file, 'w') as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    # Secure permissions (readable only by owner)
    config_file.chmod(0o600)

    logger.info(f"Configuration saved to {config_file}")


# Cached config instance
_config: Optional[TodoproConfig] = None


def get_config() -> TodoproConfig:
    """Get cached config instance, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> TodoproConfig:
    """Force reload config from file."""
    global _config
    _config = load_config()
    return _config
