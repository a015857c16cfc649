"""Unit tests for MySQLConnector."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from askdb.connectors.base import ConnectionError, QueryError, SchemaError
from askdb.connectors.dialect import DialectKind
from askdb.connectors.mysql import MySQLConnector


def _install_fake_mysql(monkeypatch, connect_impl: Mock) -> None:
    fake_mysql = SimpleNamespace(
        connector=SimpleNamespace(connect=connect_impl),
    )
    monkeypatch.setattr("askdb.connectors.mysql.mysql", fake_mysql)


def _build_connection(
    *,
    with_rows: bool = True,
    rows: list[dict] | None = None,
    version: str = "8.0.36",
):
    conn = Mock()
    cursor = Mock()
    conn.cursor.return_value = cursor
    cursor.with_rows = with_rows
    cursor.fetchall.return_value = rows or []
    cursor.fetchone.return_value = (version,)
    cursor.description = [("id",), ("name",)]
    return conn, cursor


def _connector() -> MySQLConnector:
    return MySQLConnector(
        host="localhost",
        port=3306,
        database="app",
        user="root",
        password="secret",
    )


@pytest.mark.asyncio
async def test_connect_success(monkeypatch):
    conn, cursor = _build_connection()
    connect_impl = Mock(return_value=conn)
    _install_fake_mysql(monkeypatch, connect_impl)

    connector = _connector()
    await connector.connect()

    assert connector.is_connected is True
    assert connector.server_version == "8.0.36"
    cursor.execute.assert_called_with("SELECT VERSION()")
    conn.close.assert_called_once()


@pytest.mark.asyncio
async def test_connect_failure_raises_connection_error(monkeypatch):
    connect_impl = Mock(side_effect=Exception("connection refused"))
    _install_fake_mysql(monkeypatch, connect_impl)

    connector = _connector()

    with pytest.raises(ConnectionError, match="Failed to connect|Connection error"):
        await connector.connect()
    assert connector.is_connected is False


@pytest.mark.asyncio
async def test_dialect_mysql(monkeypatch):
    conn, _ = _build_connection(version="8.0.36")
    _install_fake_mysql(monkeypatch, Mock(return_value=conn))

    connector = _connector()
    await connector.connect()

    assert connector.is_maria is False
    assert connector.dialect.kind == DialectKind.MYSQL
    assert connector.dialect.label == "MySQL"


@pytest.mark.asyncio
async def test_dialect_mariadb_detected_from_version(monkeypatch):
    conn, _ = _build_connection(version="10.11.6-MariaDB-1:10.11.6+maria~ubu2204")
    _install_fake_mysql(monkeypatch, Mock(return_value=conn))

    connector = _connector()
    await connector.connect()

    assert connector.is_maria is True
    assert connector.dialect.kind == DialectKind.MARIADB
    assert connector.dialect.label == "MariaDB"


@pytest.mark.asyncio
async def test_execute_query_returns_rows(monkeypatch):
    conn1, _ = _build_connection()
    rows = [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]
    conn2, cursor2 = _build_connection(rows=rows)
    connect_impl = Mock(side_effect=[conn1, conn2])
    _install_fake_mysql(monkeypatch, connect_impl)

    connector = _connector()
    await connector.connect()
    result = await connector.execute("SELECT id, name FROM users")

    assert result.row_count == 2
    assert result.columns == ["id", "name"]
    assert result.first_row == {"id": 1, "name": "Alice"}
    cursor2.execute.assert_called_with("SELECT id, name FROM users")


@pytest.mark.asyncio
async def test_execute_without_connect_raises(monkeypatch):
    _install_fake_mysql(monkeypatch, Mock())
    connector = _connector()

    with pytest.raises(ConnectionError, match="Not connected"):
        await connector.execute("SELECT 1")


@pytest.mark.asyncio
async def test_execute_error_raises_query_error(monkeypatch):
    conn1, _ = _build_connection()
    conn2, cursor2 = _build_connection()
    cursor2.execute.side_effect = Exception("bad query")
    connect_impl = Mock(side_effect=[conn1, conn2])
    _install_fake_mysql(monkeypatch, connect_impl)

    connector = _connector()
    await connector.connect()
    with pytest.raises(QueryError, match="Query"):
        await connector.execute("SELECT nope")


@pytest.mark.asyncio
async def test_get_table_names(monkeypatch):
    conn1, _ = _build_connection()
    conn2, _ = _build_connection(rows=[{"table_name": "accounts"}, {"table_name": "transactions"}])
    _install_fake_mysql(monkeypatch, Mock(side_effect=[conn1, conn2]))

    connector = _connector()
    await connector.connect()

    assert await connector.get_table_names() == ["accounts", "transactions"]


@pytest.mark.asyncio
async def test_get_columns(monkeypatch):
    conn1, _ = _build_connection()
    conn2, cursor2 = _build_connection(
        rows=[
            {"column_name": "id", "column_type": "int(11)"},
            {"column_name": "amount", "column_type": "decimal(10,2)"},
        ]
    )
    _install_fake_mysql(monkeypatch, Mock(side_effect=[conn1, conn2]))

    connector = _connector()
    await connector.connect()
    columns = await connector.get_columns("transactions")

    assert [(c.name, c.data_type) for c in columns] == [
        ("id", "int(11)"),
        ("amount", "decimal(10,2)"),
    ]
    assert cursor2.execute.call_args[0][1] == ("transactions",)


@pytest.mark.asyncio
async def test_get_columns_error_raises(monkeypatch):
    conn1, _ = _build_connection()
    conn2, cursor2 = _build_connection()
    cursor2.execute.side_effect = Exception("schema error")
    _install_fake_mysql(monkeypatch, Mock(side_effect=[conn1, conn2]))

    connector = _connector()
    await connector.connect()
    with pytest.raises(SchemaError, match="schema|introspect"):
        await connector.get_columns("transactions")


@pytest.mark.asyncio
async def test_get_distinct_values(monkeypatch):
    conn1, _ = _build_connection()
    conn2, cursor2 = _build_connection(
        rows=[{"transaction_type": "credit"}, {"transaction_type": "debit"}]
    )
    _install_fake_mysql(monkeypatch, Mock(side_effect=[conn1, conn2]))

    connector = _connector()
    await connector.connect()

    values = await connector.get_distinct_values("transactions", "transaction_type")

    assert values == ["credit", "debit"]
    assert "SELECT DISTINCT transaction_type FROM transactions" in cursor2.execute.call_args[0][0]
