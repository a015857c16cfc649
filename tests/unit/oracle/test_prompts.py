"""Unit tests for prompt builders."""

from datetime import date

from askdb.connectors.base import ColumnInfo, TableInfo
from askdb.models.oracle import PromptContext
from askdb.oracle.prompts import (
    TABLE_RELATIONSHIP_HINT,
    build_query_prompt,
    build_table_filter_prompt,
    format_table_columns,
)


def _transactions() -> TableInfo:
    return TableInfo(
        table_name="transactions",
        columns=[
            ColumnInfo(name="id", data_type="integer"),
            ColumnInfo(name="amount", data_type="numeric"),
        ],
    )


def _context(**overrides) -> PromptContext:
    values = {
        "question": "How many transactions happened last month?",
        "dialect": "PostgreSQL",
        "tables": [_transactions()],
        "current_date": date(2024, 3, 15),
        "transaction_types": ["credit", "debit"],
    }
    values.update(overrides)
    return PromptContext(**values)


class TestTableFilterPrompt:
    def test_exact_layout(self):
        prompt = build_table_filter_prompt("What is the balance?", ["accounts", "transactions"])

        assert prompt == "\n".join(
            [
                "Given the below input question and list of potential tables, output a comma "
                "separated list of the table names that may be necessary to answer this question.",
                "",
                TABLE_RELATIONSHIP_HINT,
                "",
                "Question: What is the balance?",
                "Table Names: accounts,transactions",
                "",
                "Relevant Table Names:",
            ]
        )

    def test_no_trailing_newline(self):
        assert not build_table_filter_prompt("q", ["a"]).endswith("\n")


class TestFormatTableColumns:
    def test_columns_in_order(self):
        assert (
            format_table_columns(_transactions())
            == '"transactions" has columns: id (integer), amount (numeric)'
        )

    def test_table_without_columns(self):
        assert format_table_columns(TableInfo(table_name="audit")) == '"audit" has columns: '


class TestQueryPrompt:
    def test_query_variant(self):
        prompt = build_query_prompt(_context())

        assert prompt.startswith(
            "Given an input question, first create a syntactically correct PostgreSQL query"
        )
        assert '"transactions" has columns: id (integer), amount (numeric)' in prompt
        assert "the current date is 2024-03-15." in prompt
        assert "the types are credit, debit" in prompt
        assert "SQLResult:" not in prompt
        assert "Answer:" not in prompt
        assert prompt.endswith(
            'Question: "How many transactions happened last month?"\nSQLQuery: "SQL Query to run"'
        )

    def test_answer_variant(self):
        prompt = build_query_prompt(
            _context(query="SELECT COUNT(*) FROM transactions", result='{"count": 37}')
        )

        assert 'SQLResult: "Result of the SQLQuery"' in prompt
        assert 'Answer: "Final answer here"' in prompt
        assert "use it to answer the question in a natural sounding way" in prompt
        assert prompt.endswith(
            'SQLQuery: "SELECT COUNT(*) FROM transactions"\n'
            'SQLResult: "{"count": 37}"\n'
            "Answer:"
        )

    def test_query_without_result_stays_query_variant(self):
        prompt = build_query_prompt(_context(query="SELECT 1"))

        assert not prompt.endswith("Answer:")

    def test_tables_listed_in_order(self):
        accounts = TableInfo(table_name="accounts", columns=[ColumnInfo(name="id", data_type="int")])
        prompt = build_query_prompt(_context(tables=[accounts, _transactions()]))

        assert prompt.index('"accounts"') < prompt.index('"transactions"')

    def test_empty_transaction_types(self):
        prompt = build_query_prompt(_context(transaction_types=[]))

        assert "the types are \n" in prompt

    def test_dialect_label_used(self):
        assert "syntactically correct MariaDB query" in build_query_prompt(_context(dialect="MariaDB"))
