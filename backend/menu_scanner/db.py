"""
SQLite plumbing shared by the wine store and the reference catalog.

ensure_schema() migrates a database file to the latest Alembic revision;
BaseRepository hands each thread its own connection with foreign keys on
and a Unicode ULOWER() function registered for case-insensitive lookups.
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from alembic import command
from alembic.config import Config as AlembicConfig

logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).parent.parent


def _alembic_config(db_path: str) -> AlembicConfig:
    cfg = AlembicConfig(str(BACKEND_DIR / "alembic.ini"))
    cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    cfg.set_main_option("sqlalchemy.url", f"sqlite:///{db_path}")
    return cfg


def ensure_schema(db_path: str) -> None:
    """Migrate db_path to head, creating its directory first. Idempotent."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    logging.getLogger("alembic").setLevel(logging.WARNING)

    try:
        command.upgrade(_alembic_config(db_path), "head")
    except Exception as e:
        logger.error(f"Migration to head failed for {db_path}: {e}")
        raise
    logger.debug(f"Database {db_path} at head")


def _unicode_lower(value: Optional[str]) -> Optional[str]:
    # Unicode-aware; SQLite's LOWER() folds ASCII only
    return value.lower() if value is not None else None


class BaseRepository:
    """Per-thread SQLite connections plus a commit-or-rollback transaction helper."""

    def __init__(self, db_path: Optional[str] = None, use_wal: bool = True):
        if db_path is None:
            from .config import Config
            db_path = Config.database_path()

        self.db_path = str(db_path)
        self._local = threading.local()
        self._use_wal = use_wal

    def _get_connection(self) -> sqlite3.Connection:
        """Open (once per thread) and return this thread's connection."""
        conn = getattr(self._local, "connection", None)
        if conn is None:
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            conn.create_function("ULOWER", 1, _unicode_lower, deterministic=True)
            # Cascade deletes from wines to ratings and scan links
            conn.execute("PRAGMA foreign_keys = ON")
            if self._use_wal:
                conn.execute("PRAGMA journal_mode = WAL")
            self._local.connection = conn
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor; commit on success, roll back and re-raise on error."""
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            yield cursor
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def close(self) -> None:
        """Close the calling thread's connection, if open."""
        conn = getattr(self._local, "connection", None)
        if conn is not None:
            conn.close()
            self._local.connection = None
