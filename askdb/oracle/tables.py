"""
Table selection for prompts.

Table names are listed once per connection and kept in a process-wide cache.
Above a configurable table count, the completion service is asked to narrow
the list to the tables relevant to the question. Narrowing is optional:
when it fails, the full list is used.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from askdb.connectors.base import BaseConnector, ConnectorError, TableInfo
from askdb.models.oracle import is_valid_answer
from askdb.oracle.completion import CompletionClient
from askdb.oracle.prompts import build_table_filter_prompt

logger = logging.getLogger(__name__)


class TableCache:
    """
    Table name lists keyed by connection identifier.

    The first caller for a connection loads the list while holding a lock,
    so concurrent cold-start callers share one introspection call. Failed
    loads are not cached.
    """

    def __init__(self) -> None:
        self._tables: dict[str, list[str]] = {}
        self._lock = asyncio.Lock()

    async def get_or_load(
        self,
        connection: str,
        loader: Callable[[], Awaitable[list[str]]],
    ) -> list[str]:
        cached = self._tables.get(connection)
        if cached is not None:
            return list(cached)

        async with self._lock:
            if connection not in self._tables:
                self._tables[connection] = list(await loader())
                logger.debug(
                    "Cached table list",
                    extra={"connection": connection, "table_count": len(self._tables[connection])},
                )
            return list(self._tables[connection])

    def invalidate(self, connection: str | None = None) -> None:
        """Forget one connection's tables, or every connection's when None."""
        if connection is None:
            self._tables.clear()
        else:
            self._tables.pop(connection, None)

    def __contains__(self, connection: str) -> bool:
        return connection in self._tables


default_table_cache = TableCache()


class TableSelector:
    """Resolves which tables a question's prompt should describe."""

    def __init__(
        self,
        connector: BaseConnector,
        completion: CompletionClient,
        connection: str = "default",
        max_tables_before_lookup: int = 20,
        cache: TableCache | None = None,
    ):
        self.connector = connector
        self.completion = completion
        self.connection = connection
        self.max_tables_before_lookup = max_tables_before_lookup
        self.cache = cache if cache is not None else default_table_cache

    async def list_tables(self) -> list[str]:
        """All table names of the connection; empty when introspection fails."""
        try:
            return await self.cache.get_or_load(self.connection, self.connector.get_table_names)
        except ConnectorError as e:
            logger.error(
                "Failed to list tables for connection.",
                extra={"connection": self.connection, "error": str(e)},
            )
            return []

    async def get_tables(self, question: str) -> list[str]:
        """Tables relevant to ``question``, narrowed by the LLM for large schemas."""
        tables = await self.list_tables()

        if not tables or len(tables) < self.max_tables_before_lookup:
            return tables

        return await self.filter_matching_tables(question, tables)

    async def filter_matching_tables(self, question: str, tables: list[str]) -> list[str]:
        """
        Keep the tables the completion service names, in their original order.

        Falls back to ``tables`` unchanged when the completion fails.
        """
        prompt = build_table_filter_prompt(question, tables)
        outcome = await self.completion.query_completion(prompt, stop="\n", temperature=0.0)

        response = outcome.render()
        if not outcome.ok or not is_valid_answer(response):
            logger.warning(
                "Failed to filter tables using the completion service. Returning all tables.",
                extra={"reason": response},
            )
            return tables

        candidates = {name.strip().lower() for name in response.split(",")}
        matching = [table for table in tables if table.lower() in candidates]

        logger.info(
            "Narrowed table list",
            extra={"table_count": len(tables), "matching_count": len(matching)},
        )
        return matching

    async def describe_tables(self, names: list[str]) -> list[TableInfo]:
        """Fetch columns for each table; a failing table is listed without columns."""
        described = []
        for name in names:
            try:
                columns = await self.connector.get_columns(name)
            except ConnectorError as e:
                logger.error(
                    "Failed to introspect table columns.",
                    extra={"table": name, "error": str(e)},
                )
                columns = []
            described.append(TableInfo(table_name=name, columns=columns))
        return described
