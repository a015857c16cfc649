"""
AskDB CLI

Command-line interface for asking questions about a database.

Usage:
    askdb ask "How many transactions happened last month?"
    askdb query "How many transactions happened last month?"
    askdb tables "What is the balance of account 1000?"
    askdb chat
"""

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable

import click
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from askdb.config import get_settings
from askdb.connectors.base import ConnectorError
from askdb.models.oracle import is_valid_answer
from askdb.oracle import Oracle

console = Console()

EXIT_WORDS = {"exit", "quit", "q", ":q"}


def configure_cli_logging(verbose: bool) -> None:
    """Keep library logs out of the terminal unless asked for."""
    level = logging.DEBUG if verbose else logging.CRITICAL
    for logger_name in ("askdb", "httpx", "openai", "asyncio"):
        logging.getLogger(logger_name).setLevel(level)


def create_oracle(database_url: str | None = None) -> Oracle:
    """Build an oracle from settings, with an optional URL override."""
    settings = get_settings()
    if database_url:
        settings = settings.model_copy(
            update={"database": settings.database.model_copy(update={"url": database_url})}
        )
    return Oracle.from_settings(settings)


def _run_with_oracle(
    ctx: click.Context,
    action: Callable[[Oracle], Awaitable[None]],
) -> None:
    async def runner() -> int:
        try:
            oracle = create_oracle(ctx.obj.get("database_url"))
        except ValueError as e:
            console.print(f"[red]Configuration error: {e}[/red]")
            return 1

        try:
            async with oracle.connector:
                await action(oracle)
        except ConnectorError as e:
            console.print(f"[red]Database error: {e}[/red]")
            return 1
        return 0

    exit_code = asyncio.run(runner())
    if exit_code:
        sys.exit(exit_code)


def print_answer(answer: str) -> None:
    if is_valid_answer(answer):
        console.print(Panel(answer, title="Answer", border_style="green"))
    else:
        console.print(f"[red]{answer}[/red]")


def print_query(query: str) -> None:
    if is_valid_answer(query):
        console.print(Syntax(query, "sql", word_wrap=True))
    else:
        console.print(f"[red]{query}[/red]")


@click.group()
@click.version_option(version="0.1.0", prog_name="AskDB")
@click.option("--database-url", envvar="ASKDB_DATABASE_URL", help="Override DATABASE_URL.")
@click.option("--verbose", "-v", is_flag=True, help="Show library logs.")
@click.pass_context
def cli(ctx: click.Context, database_url: str | None, verbose: bool):
    """AskDB - ask your database questions in plain language."""
    ctx.ensure_object(dict)
    ctx.obj["database_url"] = database_url
    configure_cli_logging(verbose)


@cli.command()
@click.argument("question")
@click.pass_context
def ask(ctx: click.Context, question: str):
    """Answer a single question."""

    async def action(oracle: Oracle) -> None:
        with console.status("[cyan]Thinking...[/cyan]", spinner="dots"):
            answer = await oracle.ask(question)
        print_answer(answer)

    _run_with_oracle(ctx, action)


@cli.command()
@click.argument("question")
@click.pass_context
def query(ctx: click.Context, question: str):
    """Print the SQL generated for a question without running it."""

    async def action(oracle: Oracle) -> None:
        with console.status("[cyan]Generating SQL...[/cyan]", spinner="dots"):
            sql = await oracle.get_query(question)
        print_query(sql)

    _run_with_oracle(ctx, action)


@cli.command()
@click.argument("question", required=False)
@click.pass_context
def tables(ctx: click.Context, question: str | None):
    """List tables, or the tables selected for QUESTION."""

    async def action(oracle: Oracle) -> None:
        if question:
            names = await oracle.tables.get_tables(question)
        else:
            names = await oracle.tables.list_tables()

        table = Table(title=f"Tables ({oracle.get_dialect()})")
        table.add_column("Name", style="cyan")
        for name in names:
            table.add_row(name)
        console.print(table)

    _run_with_oracle(ctx, action)


@cli.command()
@click.option("--show-sql", is_flag=True, help="Print the generated SQL before each answer.")
@click.pass_context
def chat(ctx: click.Context, show_sql: bool):
    """Interactive question loop."""

    async def action(oracle: Oracle) -> None:
        console.print(
            Panel(
                f"Connected to {oracle.connection} ({oracle.get_dialect()}). "
                "Type 'exit' to quit.",
                title="AskDB",
            )
        )
        while True:
            question = console.input("[bold cyan]You:[/bold cyan] ").strip()
            if not question:
                continue
            if question.lower() in EXIT_WORDS:
                console.print("[yellow]Goodbye![/yellow]")
                break
            with console.status("[cyan]Thinking...[/cyan]", spinner="dots"):
                sql, answer = await oracle.ask_with_query(question)
            if show_sql and is_valid_answer(sql):
                print_query(sql)
            print_answer(answer)

    _run_with_oracle(ctx, action)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
