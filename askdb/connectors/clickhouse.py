"""
ClickHouse Connector

Async ClickHouse connector using clickhouse-connect.

ClickHouse has no dedicated prompt label, so its dialect falls back to the
raw driver name.
"""

import asyncio
import logging
import time
from typing import Any

try:
    import clickhouse_connect
    from clickhouse_connect.driver import Client
except ImportError:
    clickhouse_connect = None
    Client = None

from askdb.connectors.base import (
    BaseConnector,
    ColumnInfo,
    ConnectionError,
    QueryError,
    QueryResult,
    SchemaError,
)

logger = logging.getLogger(__name__)


class ClickHouseConnector(BaseConnector):
    """
    ClickHouse database connector using clickhouse-connect.

    Note: clickhouse-connect is synchronous; calls are wrapped with
    asyncio.to_thread.
    """

    driver_name = "clickhouse"

    def __init__(
        self,
        host: str,
        port: int = 8123,
        database: str = "default",
        user: str = "default",
        password: str = "",
        pool_size: int = 10,
        timeout: int = 30,
        **kwargs,
    ):
        if clickhouse_connect is None:
            raise ImportError(
                "clickhouse-connect is not installed. "
                "Install it with: pip install clickhouse-connect"
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

        self._client: Client | None = None

    async def connect(self) -> None:
        """
        Establish connection to ClickHouse.

        Raises:
            ConnectionError: If connection fails
        """
        if self._connected and self._client:
            logger.debug("Already connected, skipping connection")
            return

        try:
            logger.info(f"Connecting to ClickHouse at {self.host}:{self.port}/{self.database}")

            self._client = await asyncio.to_thread(
                clickhouse_connect.get_client,
                host=self.host,
                port=self.port,
                database=self.database,
                username=self.user,
                password=self.password,
                **self.kwargs,
            )

            version = await asyncio.to_thread(self._client.command, "SELECT version()")
            logger.info(f"Connected to ClickHouse: version {version}")

            self._connected = True

        except Exception as e:
            logger.error(f"ClickHouse connection failed: {e}")
            raise ConnectionError(f"Failed to connect to ClickHouse: {e}") from e

    async def execute(self, query: str, timeout: int | None = None) -> QueryResult:
        """
        Execute a raw SQL query.

        Raises:
            QueryError: If query fails
            ConnectionError: If not connected
        """
        try:
            return await self._query(query, timeout=timeout)
        except ConnectionError:
            raise
        except Exception as e:
            logger.error(f"Query failed: {e}\nQuery: {query[:200]}...")
            raise QueryError(f"Query execution failed: {e}") from e

    async def get_table_names(self) -> list[str]:
        """List tables of the configured database from system.tables."""
        try:
            result = await self._query(
                "SELECT name FROM system.tables WHERE database = {db:String} ORDER BY name",
                params={"db": self.database},
            )
        except ConnectionError:
            raise
        except Exception as e:
            logger.error(f"Table listing failed: {e}")
            raise SchemaError(f"Failed to list tables: {e}") from e

        names = [row["name"] for row in result.rows]
        logger.info(f"Introspected database '{self.database}': found {len(names)} tables")
        return names

    async def get_columns(self, table_name: str) -> list[ColumnInfo]:
        """List columns of one table from system.columns."""
        try:
            result = await self._query(
                """
                SELECT name, type
                FROM system.columns
                WHERE database = {db:String}
                AND table = {table:String}
                ORDER BY position
                """,
                params={"db": self.database, "table": table_name},
            )
        except ConnectionError:
            raise
        except Exception as e:
            logger.error(f"Column introspection failed for {table_name}: {e}")
            raise SchemaError(f"Failed to introspect {table_name}: {e}") from e

        return [ColumnInfo(name=row["name"], data_type=row["type"]) for row in result.rows]

    async def close(self) -> None:
        """
        Close ClickHouse client and clean up resources.

        Safe to call multiple times.
        """
        if not self._client:
            logger.debug("No client to close")
            return

        try:
            await asyncio.to_thread(self._client.close)
            self._client = None
            self._connected = False
            logger.info("ClickHouse connection closed")
        except Exception as e:
            logger.error(f"Error closing connection: {e}")
            raise ConnectionError(f"Failed to close connection: {e}") from e

    async def _query(
        self,
        query: str,
        params: dict[str, Any] | None = None,
        timeout: int | None = None,
    ) -> QueryResult:
        if not self._connected or not self._client:
            raise ConnectionError("Not connected to database. Call connect() first.")

        start_time = time.perf_counter()
        result = await asyncio.to_thread(
            self._client.query,
            query,
            parameters=params or {},
            settings={"max_execution_time": timeout or self.timeout},
        )

        columns = list(result.column_names)
        result_rows = [
            {col: row[i] for i, col in enumerate(columns)} for row in result.result_rows
        ]
        execution_time_ms = (time.perf_counter() - start_time) * 1000

        logger.debug(
            f"Query executed in {execution_time_ms:.2f}ms, returned {len(result_rows)} rows"
        )

        return QueryResult(
            rows=result_rows,
            row_count=len(result_rows),
            columns=columns,
            execution_time_ms=execution_time_ms,
        )
