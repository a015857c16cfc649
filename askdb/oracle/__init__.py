"""
Oracle Module

Natural-language question answering over a SQL database.

Usage:
    from askdb.config import get_settings
    from askdb.oracle import Oracle

    oracle = Oracle.from_settings(get_settings())
    async with oracle.connector:
        answer = await oracle.ask("How many transactions happened last month?")
        sql = await oracle.get_query("How many transactions happened last month?")
"""

from askdb.oracle.completion import CompletionClient
from askdb.oracle.oracle import Oracle
from askdb.oracle.prompts import build_query_prompt, build_table_filter_prompt
from askdb.oracle.safety import FORBIDDEN_WORDS, ensure_query_safe
from askdb.oracle.tables import TableCache, TableSelector, default_table_cache

__all__ = [
    "Oracle",
    "CompletionClient",
    "TableCache",
    "TableSelector",
    "default_table_cache",
    "build_query_prompt",
    "build_table_filter_prompt",
    "ensure_query_safe",
    "FORBIDDEN_WORDS",
]
