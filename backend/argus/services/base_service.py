"""
BaseService: shared SQLite access for read-only history lookups.

Connections are opened read-only per call so that lookups can run on any
worker thread without sharing a connection.
"""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

import structlog

from ..common.errors import BaselineUnavailable

logger = structlog.get_logger("argus.services")


class BaseService:
    """Base class for SQLite-backed services."""

    def __init__(self, db_path: str | Path, timeout: float = 30.0):
        self.db_path = Path(db_path)
        self.timeout = timeout

    @contextmanager
    def _connect(self) -> Generator[sqlite3.Connection, None, None]:
        """Read-only connection with row factory."""
        if not self.db_path.exists():
            raise BaselineUnavailable(
                f"History database not found at {self.db_path}",
                details={"db_path": str(self.db_path)},
            )
        try:
            conn = sqlite3.connect(
                f"{self.db_path.resolve().as_uri()}?mode=ro",
                uri=True,
                timeout=self.timeout,
            )
        except sqlite3.Error as exc:
            raise BaselineUnavailable(
                f"Cannot open history database: {exc}",
                details={"db_path": str(self.db_path)},
            ) from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        except sqlite3.Error as exc:
            raise BaselineUnavailable(
                f"History query failed: {exc}",
                details={"db_path": str(self.db_path)},
            ) from exc
        finally:
            conn.close()

    def _execute_one(
        self,
        conn: sqlite3.Connection,
        sql: str,
        params: list[Any] | tuple = (),
    ) -> sqlite3.Row | None:
        """Execute a query expecting a single row."""
        cursor = conn.cursor()
        cursor.execute(sql, params)
        return cursor.fetchone()

    def _execute_many(
        self,
        conn: sqlite3.Connection,
        sql: str,
        params: list[Any] | tuple = (),
    ) -> list[sqlite3.Row]:
        """Execute a query expecting multiple rows."""
        cursor = conn.cursor()
        cursor.execute(sql, params)
        return cursor.fetchall()
