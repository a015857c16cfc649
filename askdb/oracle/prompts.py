"""
Prompt builders for the oracle.

Three prompts are produced from plain data:

- table filter: narrows a large table list to the tables a question needs
- query generation: asks for one SQL statement in the connection's dialect
- answer generation: same context plus the generated query and its result,
  asking only for the final ``Answer:`` line
"""

from collections.abc import Iterable, Sequence
from typing import Any

from askdb.connectors.base import TableInfo
from askdb.models.oracle import PromptContext

TABLE_RELATIONSHIP_HINT = (
    "It's important for you to know that the Transactions, Trial Balance, and Accounts "
    "table are all related, and those will be the primary tables being queried against."
)


def build_table_filter_prompt(question: str, tables: Sequence[str]) -> str:
    """Prompt asking for a comma separated subset of ``tables``."""
    lines = [
        "Given the below input question and list of potential tables, output a comma "
        "separated list of the table names that may be necessary to answer this question.",
        "",
        TABLE_RELATIONSHIP_HINT,
        "",
        f"Question: {question}",
        f"Table Names: {','.join(tables)}",
        "",
        "Relevant Table Names:",
    ]
    return _finish(lines)


def format_table_columns(table: TableInfo) -> str:
    """``"orders" has columns: id (integer), total (numeric)``"""
    columns = ", ".join(f"{column.name} ({column.data_type})" for column in table.columns)
    return f'"{table.table_name}" has columns: {columns}'


def build_query_prompt(context: PromptContext) -> str:
    """
    Build the query-generation prompt, or the answer-generation prompt when
    the context carries both a query and its result.
    """
    final = context.is_final_answer

    lines = [
        f"Given an input question, first create a syntactically correct {context.dialect} "
        "query to run, then look at the results of the query and return the answer.",
        "Use the following format:",
        "",
        'Question: "Question here"',
        'SQLQuery: "SQL Query to run"',
    ]
    if final:
        lines += [
            'SQLResult: "Result of the SQLQuery"',
            'Answer: "Final answer here"',
        ]

    lines += ["", "Only use the following tables and columns:", ""]
    lines += [format_table_columns(table) for table in context.tables]
    lines += [
        "",
        "Note that if any questions relating to relative dates are used, it's important "
        f"to know that the current date is {context.current_date.isoformat()}.",
        "if the question necessitates querying by transaction type, the types are "
        f"{_join_values(context.transaction_types)}",
    ]
    if final:
        lines.append(
            "Once you have the SQLResult, use it to answer the question in a natural sounding way."
        )

    lines.append(f'Question: "{context.question}"')
    if final:
        lines += [
            f'SQLQuery: "{context.query}"',
            f'SQLResult: "{context.result}"',
            "Answer:",
        ]
    else:
        lines.append('SQLQuery: "SQL Query to run"')

    return _finish(lines)


def _join_values(values: Iterable[Any]) -> str:
    return ", ".join(str(value) for value in values)


def _finish(lines: list[str]) -> str:
    return "\n".join(lines).rstrip("\r\n")
