"""
Base Database Connector

Abstract base class for all database connectors. Provides a consistent
async interface for connecting to, querying, and introspecting databases.

All connectors must implement:
- connect(): Establish connection
- execute(): Run a raw SQL string with timeout
- get_table_names(): List tables of the active schema
- get_columns(): List (name, type) pairs of one table
- close(): Clean up connections and pools
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from askdb.connectors.dialect import Dialect

logger = logging.getLogger(__name__)


# ============================================================================
# Data Models
# ============================================================================


class ColumnInfo(BaseModel):
    """Information about a database column."""

    name: str = Field(..., description="Column name")
    data_type: str = Field(..., description="Column data type")


class TableInfo(BaseModel):
    """A table and its ordered columns."""

    table_name: str = Field(..., description="Table name")
    columns: list[ColumnInfo] = Field(default_factory=list, description="Ordered columns")


class QueryResult(BaseModel):
    """Result from query execution."""

    rows: list[dict[str, Any]] = Field(..., description="Query result rows")
    row_count: int = Field(..., description="Number of rows returned")
    columns: list[str] = Field(..., description="Column names")
    execution_time_ms: float = Field(..., description="Query execution time in ms")

    @property
    def first_row(self) -> dict[str, Any]:
        """First row of the result, or an empty dict."""
        return dict(self.rows[0]) if self.rows else {}


class ConnectorError(Exception):
    """Base exception for connector errors."""

    pass


class ConnectionError(ConnectorError):
    """Error establishing or managing database connection."""

    pass


class QueryError(ConnectorError):
    """Error executing database query."""

    pass


class SchemaError(ConnectorError):
    """Error introspecting database schema."""

    pass


# ============================================================================
# Base Connector
# ============================================================================


class BaseConnector(ABC):
    """
    Abstract base class for database connectors.

    Usage:
        connector = PostgresConnector(host="localhost", ...)
        async with connector:
            tables = await connector.get_table_names()
            result = await connector.execute("SELECT COUNT(*) FROM users")
    """

    driver_name: str = ""

    def __init__(
        self,
        host: str,
        port: int,
        database: str,
        user: str,
        password: str,
        pool_size: int = 10,
        timeout: int = 30,
        **kwargs,
    ):
        """
        Initialize connector.

        Args:
            host: Database host
            port: Database port
            database: Database/schema name
            user: Database user
            password: Database password
            pool_size: Connection pool size (default: 10)
            timeout: Query timeout in seconds (default: 30)
            **kwargs: Additional connector-specific parameters
        """
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.password = password
        self.pool_size = pool_size
        self.timeout = timeout
        self.kwargs = kwargs

        self._pool = None
        self._connected = False

        logger.info(f"Initialized {self.__class__.__name__} for {user}@{host}:{port}/{database}")

    @abstractmethod
    async def connect(self) -> None:
        """
        Establish database connection. Idempotent.

        Raises:
            ConnectionError: If connection fails
        """
        pass

    @abstractmethod
    async def execute(self, query: str, timeout: int | None = None) -> QueryResult:
        """
        Execute a raw SQL string.

        Raises:
            QueryError: If query execution fails
            ConnectionError: If not connected
        """
        pass

    @abstractmethod
    async def get_table_names(self) -> list[str]:
        """
        List table names of the active schema, ordered by name.

        Raises:
            SchemaError: If introspection fails
        """
        pass

    @abstractmethod
    async def get_columns(self, table_name: str) -> list[ColumnInfo]:
        """
        List columns of a table in ordinal order.

        Raises:
            SchemaError: If introspection fails
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close database connection. Idempotent."""
        pass

    async def get_distinct_values(self, table_name: str, column_name: str) -> list[Any]:
        """Distinct non-null values of one column."""
        result = await self.execute(
            f"SELECT DISTINCT {column_name} FROM {table_name} WHERE {column_name} IS NOT NULL"
        )
        return [row[column_name] for row in result.rows if column_name in row]

    @property
    def dialect(self) -> Dialect:
        """SQL dialect of this connection."""
        return Dialect.from_driver(self.driver_name)

    @property
    def is_connected(self) -> bool:
        """Check if connector is connected."""
        return self._connected

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
        return False

    def __repr__(self) -> str:
        """String representation."""
        status = "connected" if self._connected else "disconnected"
        return f"<{self.__class__.__name__} {self.user}@{self.host}:{self.port}/{self.database} ({status})>"
