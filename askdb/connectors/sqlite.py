"""
SQLite Connector

Async-compatible SQLite connector built on the standard library driver.
Each operation opens a short-lived connection in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any

from askdb.connectors.base import (
    BaseConnector,
    ColumnInfo,
    ConnectionError,
    QueryError,
    QueryResult,
    SchemaError,
)

logger = logging.getLogger(__name__)


class SQLiteConnector(BaseConnector):
    """SQLite database connector for a file path (or ``:memory:``)."""

    driver_name = "sqlite"

    def __init__(self, path: str | Path, timeout: int = 30, **kwargs) -> None:
        super().__init__(
            host="localhost",
            port=0,
            database=str(path),
            user="",
            password="",
            pool_size=1,
            timeout=timeout,
            **kwargs,
        )
        self.path = str(path)

    async def connect(self) -> None:
        """Check that the database file can be opened."""
        if self._connected:
            return
        try:
            await asyncio.to_thread(self._run_sync, "SELECT sqlite_version()")
            self._connected = True
            logger.info(f"Connected to SQLite database {self.path}")
        except sqlite3.Error as exc:
            logger.error(f"SQLite connection failed: {exc}")
            raise ConnectionError(f"Failed to open SQLite database: {exc}") from exc

    async def execute(self, query: str, timeout: int | None = None) -> QueryResult:
        """Execute SQL query and return rows."""
        if not self._connected:
            raise ConnectionError("Not connected to database. Call connect() first.")

        start_time = time.perf_counter()
        try:
            rows, columns = await asyncio.to_thread(self._run_sync, query, timeout)
        except sqlite3.Error as exc:
            logger.error(f"SQLite query failed: {exc}\nQuery: {query[:200]}...")
            raise QueryError(f"Query execution failed: {exc}") from exc

        execution_time_ms = (time.perf_counter() - start_time) * 1000
        return QueryResult(
            rows=rows,
            row_count=len(rows),
            columns=columns,
            execution_time_ms=execution_time_ms,
        )

    async def get_table_names(self) -> list[str]:
        """List user tables, skipping SQLite's internal ones."""
        if not self._connected:
            raise ConnectionError("Not connected to database. Call connect() first.")
        try:
            rows, _ = await asyncio.to_thread(
                self._run_sync,
                "SELECT name FROM sqlite_master WHERE type IN ('table', 'view') "
                "AND name NOT LIKE 'sqlite_%' ORDER BY name",
            )
        except sqlite3.Error as exc:
            logger.error(f"SQLite table listing failed: {exc}")
            raise SchemaError(f"Failed to list tables: {exc}") from exc
        return [row["name"] for row in rows]

    async def get_columns(self, table_name: str) -> list[ColumnInfo]:
        """List columns of one table using PRAGMA table_info."""
        if not self._connected:
            raise ConnectionError("Not connected to database. Call connect() first.")
        quoted = table_name.replace('"', '""')
        try:
            rows, _ = await asyncio.to_thread(self._run_sync, f'PRAGMA table_info("{quoted}")')
        except sqlite3.Error as exc:
            logger.error(f"SQLite column introspection failed: {exc}")
            raise SchemaError(f"Failed to introspect {table_name}: {exc}") from exc
        return [ColumnInfo(name=row["name"], data_type=row["type"] or "") for row in rows]

    async def close(self) -> None:
        """Close connector state."""
        self._connected = False

    def _run_sync(
        self,
        query: str,
        timeout: int | None = None,
    ) -> tuple[list[dict[str, Any]], list[str]]:
        conn = sqlite3.connect(self.path, timeout=timeout or self.timeout)
        conn.row_factory = sqlite3.Row
        try:
            cursor = conn.execute(query)
            columns = [col[0] for col in cursor.description] if cursor.description else []
            rows = [dict(row) for row in cursor.fetchall()]
            return rows, columns
        finally:
            conn.close()

    def __repr__(self) -> str:
        status = "connected" if self._connected else "disconnected"
        return f"<{self.__class__.__name__} {self.path} ({status})>"
