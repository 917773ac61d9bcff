"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from paytrack.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV = "PAYTRACK_DB_PATH"
DATABASE_URL_ENV = "PAYTRACK_DATABASE_URL"
DEFAULT_DB_DIR = Path.home() / ".paytrack"


def default_database_path() -> Path:
    """Return ~/.paytrack/paytrack.db, creating the directory if needed."""
    DEFAULT_DB_DIR.mkdir(parents=True, exist_ok=True)
    return DEFAULT_DB_DIR / "paytrack.db"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a database instance for a local SQLite file.

    Resolution order: the given path, PAYTRACK_DB_PATH, then
    PAYTRACK_DATABASE_URL (any SQLAlchemy URL, for a shared server), and
    finally ~/.paytrack/paytrack.db.

    Args:
        database_path: Path to the SQLite file; "~" is expanded

    Returns:
        SQLAlchemyDatabase instance
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        database_url = os.environ.get(DATABASE_URL_ENV)
        if database_url:
            return SQLAlchemyDatabase(database_url)
        path = default_database_path()
    else:
        path = Path(database_path).expanduser()

    return SQLAlchemyDatabase(f"sqlite:///{path}")
