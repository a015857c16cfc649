"""
Oracle: question -> SQL -> answer.

Two completion calls per question:
1. query generation (temperature 0.0, stops before ``SQLResult:``)
2. answer generation from the executed query's first row (temperature 0.7)

``ask`` and ``get_query`` always return a string. Failures are carried as
``Outcome`` values internally and rendered to sentinel strings at return,
so callers can tell errors apart with ``is_valid_answer``.
"""

import json
import logging
import re
from collections.abc import Callable
from datetime import date
from typing import Any

from askdb.config import OracleSettings, Settings
from askdb.connectors.base import BaseConnector, ConnectorError, TableInfo
from askdb.connectors.factory import create_connector
from askdb.llm.base import BaseLLMProvider
from askdb.llm.factory import LLMProviderFactory
from askdb.models.oracle import (
    FailureKind,
    Outcome,
    PotentiallyUnsafeQuery,
    PromptContext,
    is_valid_answer,
)
from askdb.oracle.completion import CompletionClient
from askdb.oracle.prompts import build_query_prompt
from askdb.oracle.safety import ensure_query_safe
from askdb.oracle.tables import TableCache, TableSelector

logger = logging.getLogger(__name__)

QUERY_STOP_SEQUENCE = "\nSQLResult:"
QUERY_TEMPERATURE = 0.0
ANSWER_TEMPERATURE = 0.7

TRANSACTIONS_TABLE = "transactions"
TRANSACTION_TYPE_COLUMN = "transaction_type"

_SQL_FENCE = re.compile(r"```sql", re.IGNORECASE)
_FENCE = "```"
_QUERY_LABEL = "SQLQuery:"
_ANSWER_MARKER = "Answer:"


class Oracle:
    """
    Answers natural-language questions about one database connection.

    Usage:
        oracle = Oracle.from_settings(get_settings())
        async with oracle.connector:
            print(await oracle.ask("How many transactions happened last month?"))
    """

    def __init__(
        self,
        connector: BaseConnector,
        provider: BaseLLMProvider,
        settings: OracleSettings | None = None,
        connection: str = "default",
        cache: TableCache | None = None,
        today: Callable[[], date] = date.today,
    ):
        self.connector = connector
        self.settings = settings or OracleSettings()
        self.connection = connection
        self.completion = CompletionClient(provider)
        self.tables = TableSelector(
            connector=connector,
            completion=self.completion,
            connection=connection,
            max_tables_before_lookup=self.settings.max_tables_before_performing_lookup,
            cache=cache,
        )
        self._today = today

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        connector: BaseConnector | None = None,
        provider: BaseLLMProvider | None = None,
    ) -> "Oracle":
        """Build an oracle from application settings."""
        if connector is None:
            if not settings.database.url:
                raise ValueError("DATABASE_URL is not configured")
            connector = create_connector(
                database_url=settings.database.url,
                database_type=settings.database.db_type,
                pool_size=settings.database.pool_size,
                timeout=settings.database.timeout,
            )
        if provider is None:
            provider = LLMProviderFactory.create_provider(settings.llm)
        return cls(
            connector=connector,
            provider=provider,
            settings=settings.oracle,
            connection=settings.database.connection,
        )

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    async def ask(self, question: str) -> str:
        """Answer ``question`` in natural language, or return a sentinel string."""
        _, answer = await self.ask_with_query(question)
        return answer

    async def ask_with_query(self, question: str) -> tuple[str, str]:
        """
        Answer ``question`` and also return the SQL that produced the answer.

        Returns ``(query, answer)``. When query generation fails both items
        are the same sentinel string.
        """
        if not question or not question.strip():
            sentinel = Outcome.fail(FailureKind.INVALID_QUESTION).render()
            return sentinel, sentinel

        tables = await self._resolve_tables(question)
        query_outcome = await self._generate_query(question, tables)
        query = query_outcome.render()
        if not query_outcome.ok or not self.is_valid_sql(query):
            return query, query

        result = json.dumps(await self.evaluate_query(query), default=str)

        prompt = await self.build_prompt(question, tables, query=query, result=result)
        outcome = await self.completion.query_completion(
            prompt, stop=None, temperature=ANSWER_TEMPERATURE
        )
        raw = outcome.render()
        if not outcome.ok or not self.is_valid_answer(raw):
            return query, raw

        answer = self.extract_answer(raw)
        if not answer:
            logger.info("Completion had no usable Answer: marker, returning raw text")
            return query, raw
        return query, answer

    async def get_query(self, question: str) -> str:
        """Generate the cleaned SQL for ``question``, or return a sentinel string."""
        if not question or not question.strip():
            return Outcome.fail(FailureKind.INVALID_QUESTION).render()

        tables = await self._resolve_tables(question)
        return (await self._generate_query(question, tables)).render()

    async def evaluate_query(self, query: str) -> dict[str, Any]:
        """First row of ``query``'s result; empty on failure, no rows, or empty query."""
        if not query or not query.strip():
            return {}

        try:
            result = await self.connector.execute(query)
        except ConnectorError as e:
            logger.error("SQL query evaluation failed.", extra={"query": query, "error": str(e)})
            return {}

        return result.first_row

    def get_dialect(self) -> str:
        """Dialect label of the active connection."""
        return self.connector.dialect.label

    @staticmethod
    def is_valid_answer(text: str | None) -> bool:
        return is_valid_answer(text)

    @staticmethod
    def is_valid_sql(query: str | None) -> bool:
        return is_valid_answer(query)

    # ------------------------------------------------------------------
    # Prompt assembly
    # ------------------------------------------------------------------

    async def build_prompt(
        self,
        question: str,
        tables: list[TableInfo],
        query: str | None = None,
        result: str | None = None,
    ) -> str:
        context = PromptContext(
            question=question,
            dialect=self.get_dialect(),
            tables=tables,
            current_date=self._today(),
            transaction_types=await self._transaction_types(),
            query=query,
            result=result,
        )
        return build_query_prompt(context)

    async def _resolve_tables(self, question: str) -> list[TableInfo]:
        names = await self.tables.get_tables(question)
        return await self.tables.describe_tables(names)

    async def _transaction_types(self) -> list[Any]:
        known = {name.lower() for name in await self.tables.list_tables()}
        if TRANSACTIONS_TABLE not in known:
            return []
        try:
            return await self.connector.get_distinct_values(
                TRANSACTIONS_TABLE, TRANSACTION_TYPE_COLUMN
            )
        except ConnectorError as e:
            logger.warning(
                "Could not load transaction types.",
                extra={"error": str(e)},
            )
            return []

    # ------------------------------------------------------------------
    # Query generation
    # ------------------------------------------------------------------

    async def _generate_query(self, question: str, tables: list[TableInfo]) -> Outcome:
        prompt = await self.build_prompt(question, tables)
        outcome = await self.completion.query_completion(
            prompt, stop=QUERY_STOP_SEQUENCE, temperature=QUERY_TEMPERATURE
        )
        if not outcome.ok or not self.is_valid_answer(outcome.value):
            return outcome

        query = self.clean_query(outcome.value)

        try:
            ensure_query_safe(query, self.settings.strict_mode)
        except PotentiallyUnsafeQuery as e:
            logger.warning(
                "Potentially unsafe query generated.",
                extra={"query": query, "reason": e.reason},
            )
            return Outcome.fail(FailureKind.UNSAFE_QUERY, str(e))

        logger.info("Generated query", extra={"query": query})
        return Outcome.success(query)

    @staticmethod
    def clean_query(text: str) -> str:
        """
        Reduce raw completion text to a bare SQL string.

        Handles fenced code blocks, a leading ``SQLQuery:`` label, a trailing
        semicolon and one pair of double quotes around the whole query.
        Quoted identifiers inside the query are left alone.
        """
        query = text.strip()

        match = _SQL_FENCE.search(query)
        if match:
            query = _before_last_fence(query[match.end():])
        elif _FENCE in query:
            query = _before_last_fence(query.split(_FENCE, 1)[1])

        query = query.strip()
        if query.startswith(_QUERY_LABEL):
            query = query[len(_QUERY_LABEL):].strip()

        query = _unquote(query.strip(";").strip())
        return query.strip(";").strip()

    @staticmethod
    def extract_answer(text: str) -> str:
        """Text after the first ``Answer:`` marker, unquoted; empty without a marker."""
        if _ANSWER_MARKER not in text:
            return ""
        return _unquote(text.split(_ANSWER_MARKER, 1)[1].strip())


def _before_last_fence(text: str) -> str:
    index = text.rfind(_FENCE)
    return text[:index] if index != -1 else text


def _unquote(text: str) -> str:
    """Drop one surrounding pair of double quotes."""
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text[1:-1].strip()
    return text
