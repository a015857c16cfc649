"""
PostgreSQL Connector

Async PostgreSQL connector using asyncpg.

Usage:
    connector = PostgresConnector(
        host="localhost",
        port=5432,
        database="mydb",
        user="postgres",
        password="secret"
    )

    await connector.connect()
    tables = await connector.get_table_names()
    result = await connector.execute("SELECT COUNT(*) FROM users")
    await connector.close()
"""

import logging
import time
from typing import List, Optional

import asyncpg

from askdb.connectors.base import (
    BaseConnector,
    ColumnInfo,
    ConnectionError,
    QueryError,
    QueryResult,
    SchemaError,
)

logger = logging.getLogger(__name__)


class PostgresConnector(BaseConnector):
    """
    PostgreSQL database connector using asyncpg.

    Introspection is limited to one schema (``public`` unless
    ``schema_name`` is given).
    """

    driver_name = "pgsql"

    def __init__(self, *args, schema_name: str = "public", **kwargs):
        super().__init__(*args, **kwargs)
        self.schema_name = schema_name

    async def connect(self) -> None:
        """
        Establish connection to PostgreSQL and create connection pool.

        Raises:
            ConnectionError: If connection fails
        """
        if self._connected and self._pool:
            logger.debug("Already connected, skipping connection")
            return

        try:
            logger.info(f"Connecting to PostgreSQL at {self.host}:{self.port}/{self.database}")

            self._pool = await asyncpg.create_pool(
                host=self.host,
                port=self.port,
                database=self.database,
                user=self.user,
                password=self.password,
                min_size=1,
                max_size=self.pool_size,
                command_timeout=self.timeout,
                **self.kwargs,
            )

            async with self._pool.acquire() as conn:
                version = await conn.fetchval("SELECT version()")
                logger.info(f"Connected to PostgreSQL: {version.split(',')[0]}")

            self._connected = True

        except asyncpg.PostgresError as e:
            logger.error(f"PostgreSQL connection failed: {e}")
            raise ConnectionError(f"Failed to connect to PostgreSQL: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error during connection: {e}")
            raise ConnectionError(f"Connection error: {e}") from e

    async def execute(self, query: str, timeout: Optional[int] = None) -> QueryResult:
        """
        Execute a raw SQL query.

        Raises:
            QueryError: If query fails
            ConnectionError: If not connected
        """
        if not self._connected or not self._pool:
            raise ConnectionError("Not connected to database. Call connect() first.")

        start_time = time.perf_counter()
        query_timeout = timeout or self.timeout

        try:
            async with self._pool.acquire() as conn:
                await conn.execute(f"SET statement_timeout = {query_timeout * 1000}")
                rows = await conn.fetch(query)

                result_rows = [dict(row) for row in rows]
                columns = list(rows[0].keys()) if rows else []

                execution_time_ms = (time.perf_counter() - start_time) * 1000

                logger.debug(
                    f"Query executed in {execution_time_ms:.2f}ms, "
                    f"returned {len(result_rows)} rows"
                )

                return QueryResult(
                    rows=result_rows,
                    row_count=len(result_rows),
                    columns=columns,
                    execution_time_ms=execution_time_ms,
                )

        except asyncpg.QueryCanceledError as e:
            logger.error(f"Query timed out after {query_timeout}s: {query[:100]}...")
            raise QueryError(f"Query timeout ({query_timeout}s)") from e
        except asyncpg.PostgresError as e:
            logger.error(f"Query failed: {e}\nQuery: {query[:200]}...")
            raise QueryError(f"Query execution failed: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error during query execution: {e}")
            raise QueryError(f"Query error: {e}") from e

    async def get_table_names(self) -> List[str]:
        """
        List base tables and views of the configured schema.

        Raises:
            SchemaError: If introspection fails
        """
        if not self._connected or not self._pool:
            raise ConnectionError("Not connected to database. Call connect() first.")

        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    """
                    SELECT table_name
                    FROM information_schema.tables
                    WHERE table_schema = $1
                    AND table_type IN ('BASE TABLE', 'VIEW')
                    ORDER BY table_name
                    """,
                    self.schema_name,
                )
        except asyncpg.PostgresError as e:
            logger.error(f"Table listing failed: {e}")
            raise SchemaError(f"Failed to list tables: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error during table listing: {e}")
            raise SchemaError(f"Table listing error: {e}") from e

        names = [row["table_name"] for row in rows]
        logger.info(f"Introspected schema '{self.schema_name}': found {len(names)} tables")
        return names

    async def get_columns(self, table_name: str) -> List[ColumnInfo]:
        """
        List columns of one table in ordinal order.

        Raises:
            SchemaError: If introspection fails
        """
        if not self._connected or not self._pool:
            raise ConnectionError("Not connected to database. Call connect() first.")

        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    """
                    SELECT column_name, data_type
                    FROM information_schema.columns
                    WHERE table_schema = $1 AND table_name = $2
                    ORDER BY ordinal_position
                    """,
                    self.schema_name,
                    table_name,
                )
        except asyncpg.PostgresError as e:
            logger.error(f"Column introspection failed for {table_name}: {e}")
            raise SchemaError(f"Failed to introspect {table_name}: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error during column introspection: {e}")
            raise SchemaError(f"Column introspection error: {e}") from e

        return [ColumnInfo(name=row["column_name"], data_type=row["data_type"]) for row in rows]

    async def close(self) -> None:
        """
        Close connection pool and clean up resources.

        Safe to call multiple times.
        """
        if not self._pool:
            logger.debug("No connection pool to close")
            return

        try:
            await self._pool.close()
            self._pool = None
            self._connected = False
            logger.info("PostgreSQL connection closed")
        except Exception as e:
            logger.error(f"Error closing connection: {e}")
            raise ConnectionError(f"Failed to close connection: {e}") from e
