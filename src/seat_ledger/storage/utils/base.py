"""Shared connection handling for the table managers."""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Any

from ...exceptions import NotFoundError


@contextmanager
def connect(db_path: str | Path) -> Iterator[sqlite3.Connection]:
    """Open a connection with foreign keys enforced and rows addressable by name.

    Commits on success, rolls back on error and always closes.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a TIMESTAMP column value."""
    return datetime.fromisoformat(value) if value else None


def parse_day(value: str | None) -> date | None:
    """Parse a DATE column value."""
    return date.fromisoformat(value) if value else None


class BaseManager:
    """Base class for managers that own one or more tables."""

    def __init__(self, db_path: str | Path):
        """Initialize manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)

    def _connect(self):
        return connect(self.db_path)

    @staticmethod
    def _require(conn: sqlite3.Connection, table: str, entity: str, entity_id: Any) -> sqlite3.Row:
        """Fetch a row by primary key or raise NotFoundError."""
        row = conn.execute(f"SELECT * FROM {table} WHERE id = ?", (entity_id,)).fetchone()
        if row is None:
            raise NotFoundError(entity, entity_id)
        return row
