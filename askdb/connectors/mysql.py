"""
MySQL Connector

Async-compatible MySQL/MariaDB connector using mysql-connector-python.

The underlying driver is synchronous, so query and schema operations are
executed in worker threads via asyncio.to_thread.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

try:
    import mysql.connector
    from mysql.connector import Error as MySQLError
except ImportError:  # pragma: no cover - dependency guard
    mysql = None
    MySQLError = Exception

from askdb.connectors.base import (
    BaseConnector,
    ColumnInfo,
    ConnectionError,
    QueryError,
    QueryResult,
    SchemaError,
)
from askdb.connectors.dialect import Dialect, DialectKind

logger = logging.getLogger(__name__)


class MySQLConnector(BaseConnector):
    """MySQL database connector using mysql-connector-python."""

    driver_name = "mysql"

    def __init__(
        self,
        host: str,
        port: int = 3306,
        database: str = "",
        user: str = "root",
        password: str = "",
        pool_size: int = 10,
        timeout: int = 30,
        **kwargs,
    ) -> None:
        if mysql is None:
            raise ImportError(
                "mysql-connector-python is not installed. "
                "Install it with: pip install mysql-connector-python"
            )
        super().__init__(
            host=host,
            port=port,
            database=database,
            user=user,
            password=password,
            pool_size=pool_size,
            timeout=timeout,
            **kwargs,
        )
        self.server_version: str | None = None

    @property
    def is_maria(self) -> bool:
        """Whether the server identified itself as MariaDB."""
        return bool(self.server_version and "mariadb" in self.server_version.lower())

    @property
    def dialect(self) -> Dialect:
        if self.is_maria:
            return Dialect(kind=DialectKind.MARIADB, driver=self.driver_name)
        return Dialect(kind=DialectKind.MYSQL, driver=self.driver_name)

    async def connect(self) -> None:
        """Validate connection credentials and record the server version."""
        if self._connected:
            return
        try:
            self.server_version = await asyncio.to_thread(self._test_connection_sync)
            self._connected = True
        except MySQLError as exc:
            logger.error(f"MySQL connection failed: {exc}")
            raise ConnectionError(f"Failed to connect to MySQL: {exc}") from exc
        except Exception as exc:
            logger.error(f"MySQL connection failed: {exc}")
            raise ConnectionError(f"Connection error: {exc}") from exc

    async def execute(self, query: str, timeout: int | None = None) -> QueryResult:
        """Execute SQL query and return rows."""
        if not self._connected:
            raise ConnectionError("Not connected to database. Call connect() first.")

        start_time = time.perf_counter()
        query_timeout = timeout or self.timeout
        try:
            rows, columns = await asyncio.to_thread(self._execute_sync, query, query_timeout)
            execution_time_ms = (time.perf_counter() - start_time) * 1000
            return QueryResult(
                rows=rows,
                row_count=len(rows),
                columns=columns,
                execution_time_ms=execution_time_ms,
            )
        except MySQLError as exc:
            logger.error(f"MySQL query failed: {exc}\nQuery: {query[:200]}...")
            raise QueryError(f"Query execution failed: {exc}") from exc
        except Exception as exc:
            logger.error(f"MySQL query failed: {exc}\nQuery: {query[:200]}...")
            raise QueryError(f"Query error: {exc}") from exc

    async def get_table_names(self) -> list[str]:
        """List tables of the configured database."""
        if not self._connected:
            raise ConnectionError("Not connected to database. Call connect() first.")
        try:
            rows, _ = await asyncio.to_thread(
                self._execute_sync,
                "SELECT table_name AS table_name FROM information_schema.tables "
                "WHERE table_schema = DATABASE() ORDER BY table_name",
                self.timeout,
            )
        except MySQLError as exc:
            logger.error(f"MySQL table listing failed: {exc}")
            raise SchemaError(f"Failed to list tables: {exc}") from exc
        except Exception as exc:
            logger.error(f"MySQL table listing failed: {exc}")
            raise SchemaError(f"Schema error: {exc}") from exc
        return [str(row["table_name"]) for row in rows]

    async def get_columns(self, table_name: str) -> list[ColumnInfo]:
        """List columns of one table via information_schema."""
        if not self._connected:
            raise ConnectionError("Not connected to database. Call connect() first.")
        try:
            return await asyncio.to_thread(self._get_columns_sync, table_name)
        except MySQLError as exc:
            logger.error(f"MySQL column introspection failed: {exc}")
            raise SchemaError(f"Failed to introspect {table_name}: {exc}") from exc
        except Exception as exc:
            logger.error(f"MySQL column introspection failed: {exc}")
            raise SchemaError(f"Schema error: {exc}") from exc

    async def close(self) -> None:
        """Close connector state."""
        self._connected = False

    def _connection_kwargs(self, query_timeout: int | None = None) -> dict[str, Any]:
        kwargs = {
            "host": self.host,
            "port": self.port,
            "database": self.database or None,
            "user": self.user,
            "password": self.password,
            "autocommit": True,
            "connection_timeout": query_timeout or self.timeout,
        }
        kwargs.update(self.kwargs)
        return kwargs

    def _test_connection_sync(self) -> str:
        conn = mysql.connector.connect(**self._connection_kwargs())
        cursor = conn.cursor()
        try:
            cursor.execute("SELECT VERSION()")
            row = cursor.fetchone()
            return str(row[0]) if row else ""
        finally:
            cursor.close()
            conn.close()

    def _execute_sync(
        self,
        query: str,
        query_timeout: int,
    ) -> tuple[list[dict[str, Any]], list[str]]:
        conn = mysql.connector.connect(**self._connection_kwargs(query_timeout))
        cursor = conn.cursor(dictionary=True)
        try:
            cursor.execute(query)
            if cursor.with_rows:
                rows = cursor.fetchall()
                columns = list(rows[0].keys()) if rows else [col[0] for col in cursor.description]
                return rows, columns
            return [], []
        finally:
            cursor.close()
            conn.close()

    def _get_columns_sync(self, table_name: str) -> list[ColumnInfo]:
        conn = mysql.connector.connect(**self._connection_kwargs())
        cursor = conn.cursor(dictionary=True)
        try:
            cursor.execute(
                """
                SELECT column_name AS column_name, column_type AS column_type
                FROM information_schema.columns
                WHERE table_schema = DATABASE() AND table_name = %s
                ORDER BY ordinal_position
                """,
                (table_name,),
            )
            return [
                ColumnInfo(name=str(row["column_name"]), data_type=str(row["column_type"]))
                for row in cursor.fetchall()
            ]
        finally:
            cursor.close()
            conn.close()
