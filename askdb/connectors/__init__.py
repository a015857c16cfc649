"""
Database Connectors Module

Async connectors used for schema introspection and query execution.

Available Connectors:
    - BaseConnector: Abstract base class
    - PostgresConnector: PostgreSQL connector (asyncpg)
    - MySQLConnector: MySQL/MariaDB connector (mysql-connector-python)
    - ClickHouseConnector: ClickHouse connector (clickhouse-connect)
    - SQLiteConnector: SQLite connector (sqlite3)

Usage:
    from askdb.connectors import create_connector

    connector = create_connector(database_url="postgresql://u:p@localhost/app")

    async with connector:
        tables = await connector.get_table_names()
        result = await connector.execute("SELECT COUNT(*) FROM users")
"""

from askdb.connectors.base import (
    BaseConnector,
    ColumnInfo,
    ConnectionError,
    ConnectorError,
    QueryError,
    QueryResult,
    SchemaError,
    TableInfo,
)
from askdb.connectors.clickhouse import ClickHouseConnector
from askdb.connectors.dialect import Dialect, DialectKind
from askdb.connectors.factory import create_connector, infer_database_type, resolve_database_type
from askdb.connectors.mysql import MySQLConnector
from askdb.connectors.postgres import PostgresConnector
from askdb.connectors.sqlite import SQLiteConnector

__all__ = [
    "BaseConnector",
    "Dialect",
    "DialectKind",
    "PostgresConnector",
    "ClickHouseConnector",
    "MySQLConnector",
    "SQLiteConnector",
    "create_connector",
    "infer_database_type",
    "resolve_database_type",
    "ColumnInfo",
    "TableInfo",
    "QueryResult",
    "ConnectorError",
    "ConnectionError",
    "QueryError",
    "SchemaError",
]
