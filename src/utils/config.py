"""
Configuration for the Gestio application.

Two environments are supported:
- production: database in the user's Documents/Gestio folder
- development: database in the project's data/ folder

The environment is chosen once per process (GESTIO_ENV) and the resulting
Config is shared through get_config().
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .constants import APP_NAME, DATABASE_FILENAME, MIGRATION_DIRNAME

logger = logging.getLogger(__name__)

DEFAULT_DB_TIMEOUT = 30


class Config:
    """
    Application configuration.

    Args:
        environment: 'production' or 'development'
    """

    def __init__(self, environment: str = "production"):
        self.environment = environment

        if environment == "development":
            self._base_dir = self._get_project_data_dir()
        else:
            self._base_dir = self._get_user_documents_dir()

        self._database_path = self._base_dir / DATABASE_FILENAME
        self._db_timeout = self._read_int_env("GESTIO_DB_TIMEOUT", DEFAULT_DB_TIMEOUT)

        self._base_dir.mkdir(parents=True, exist_ok=True)

    def _get_project_data_dir(self) -> Path:
        return Path(__file__).parent.parent.parent / "data"

    def _get_user_documents_dir(self) -> Path:
        return Path.home() / "Documents" / APP_NAME

    @staticmethod
    def _read_int_env(name: str, default: int) -> int:
        """Read a positive integer from the environment, falling back to default."""
        raw = os.environ.get(name)
        if raw is None:
            return default
        try:
            value = int(raw)
        except ValueError:
            value = 0
        if value <= 0:
            logger.warning(f"Invalid {name}={raw!r}, using default {default}")
            return default
        return value

    @property
    def database_path(self) -> Path:
        """Full path to the SQLite database file."""
        return self._database_path

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL of the database (forward slashes on every platform)."""
        return "sqlite:///" + str(self._database_path).replace("\\", "/")

    @property
    def db_timeout(self) -> int:
        """SQLite busy timeout in seconds."""
        return self._db_timeout

    @property
    def migration_dir(self) -> Path:
        """Default directory offered for migration package export/import."""
        return self._base_dir / MIGRATION_DIRNAME

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def database_exists(self) -> bool:
        return self._database_path.exists()

    def __repr__(self) -> str:
        return f"Config(environment='{self.environment}', database_path='{self._database_path}')"


_config_instance: Optional[Config] = None


def get_config(environment: Optional[str] = None) -> Config:
    """
    Get the process-wide configuration.

    The environment is fixed by the first call (argument, else GESTIO_ENV,
    else production). Later calls asking for a different environment get
    the existing instance and a warning, so the database never switches
    mid-session.
    """
    global _config_instance

    if _config_instance is None:
        if environment is None:
            environment = os.environ.get("GESTIO_ENV", "production")
        _config_instance = Config(environment)
    elif environment is not None and environment != _config_instance.environment:
        logger.warning(
            f"get_config() called with environment='{environment}' but config "
            f"already exists with environment='{_config_instance.environment}'; "
            f"keeping the existing one"
        )

    return _config_instance


def reset_config():
    """Drop the process-wide configuration (tests)."""
    global _config_instance
    _config_instance = None


def get_database_url() -> str:
    return get_config().database_url
