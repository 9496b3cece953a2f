"""CLI for the ``wakaru`` package.

A Typer-based console interface over :func:`wakaru.api.parse_file`.
Environment variables (``DATABASE_URL``, ``WAKARU_LOG_LEVEL``,
``WAKARU_CHUNK_SIZE``) are loaded from a local ``.env`` using
``python-dotenv`` before any command runs. Business logic lives in
``wakaru.api`` and ``wakaru.persistence``.
"""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.table import Table
from typer.models import ArgumentInfo

from .api import parse_file, supported_banks
from .export import dump_json, transactions_to_csv
from .logging_setup import configure_logging
from .models import StatementParseResult, Transaction, TransactionCategory

console = Console()
err_console = Console(stderr=True)


class OutputFormat(StrEnum):
    TABLE = "table"
    CSV = "csv"
    JSON = "json"


# ---- Small module-level helpers used by CLI commands -------------------------


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {message}", highlight=False)
    return typer.Exit(1)


def _format_naira(kobo: int) -> str:
    naira = Decimal(abs(kobo)) / 100
    sign = "-" if kobo < 0 else "+"
    return f"{sign}₦{naira:,.2f}"


def _transactions_table(transactions: list[Transaction], title: str) -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("Date", no_wrap=True)
    table.add_column("Description")
    table.add_column("Amount", justify="right", no_wrap=True)
    table.add_column("Type", no_wrap=True)
    table.add_column("Counterparty")
    table.add_column("Reference", no_wrap=True)
    for tx in transactions:
        meta = tx.meta
        style = "green" if tx.category is TransactionCategory.INFLOW else "red"
        table.add_row(
            f"{tx.date:%Y-%m-%d %H:%M}",
            tx.description,
            f"[{style}]{_format_naira(tx.amount)}[/{style}]",
            meta.type.value if meta else "",
            (meta.counterparty_name or "") if meta else "",
            tx.reference,
        )
    return table


def _run_parse(
    data: bytes,
    file_name: str,
    bank: str,
    password: str | None,
    chunk_size: int | None,
) -> StatementParseResult:
    with Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=err_console,
        transient=True,
        disable=not err_console.is_terminal,
    ) as progress:
        task = progress.add_task("Parsing", total=100)

        def _on_progress(percent: int, message: str) -> None:
            progress.update(task, completed=percent, description=message)

        return parse_file(
            data, file_name, bank, password, _on_progress, chunk_size=chunk_size
        )


def _persist(result: StatementParseResult, database_url: str | None) -> int:
    # Deferred imports keep the parse path free of database dependencies.
    from wakaru_db.client import init_schema, session_scope

    from .persistence import insert_transactions

    init_schema(database_url=database_url)
    with session_scope(database_url=database_url) as session:
        return insert_transactions(session, result.transactions)


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Parse Nigerian bank statements (PDF, XLSX, CSV) into normalized transactions. "
        "Loads settings from a local .env before running."
    ),
)

# Module-level argument object to satisfy ruff B008 (no calls in parameter
# defaults).
STATEMENT_PATH_ARGUMENT: ArgumentInfo = typer.Argument(
    ...,
    help="Statement file (.pdf, .xlsx, .csv, or .txt with extracted PDF text)",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files itself
)


@app.command("parse")
def parse_cmd(
    path: Annotated[Path, STATEMENT_PATH_ARGUMENT],
    *,
    bank: str = typer.Option(..., "--bank", "-b", help="Bank code (see `wakaru banks`)."),
    password: str | None = typer.Option(None, help="Password for an encrypted PDF."),
    output_format: OutputFormat = typer.Option(
        OutputFormat.TABLE, "--format", "-f", help="Output format."
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write CSV/JSON output to this file instead of stdout."
    ),
    persist: bool = typer.Option(
        False, help="Insert the parsed transactions into the database."
    ),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
    chunk_size: int | None = typer.Option(
        None, help="Rows per progress update (falls back to WAKARU_CHUNK_SIZE)."
    ),
) -> None:
    """Parse one statement file and print or save its transactions."""

    try:
        data = path.read_bytes()
    except FileNotFoundError:
        raise _fail(f"File not found: {path}") from None
    except PermissionError:
        raise _fail(f"Permission denied: {path}") from None
    except IsADirectoryError:
        raise _fail(f"Not a file: {path}") from None

    result = _run_parse(data, path.name, bank, password, chunk_size)
    if result.error is not None:
        raise _fail(result.error)

    if persist:
        try:
            inserted = _persist(result, database_url)
        except Exception as e:  # noqa: BLE001
            raise _fail(f"persistence failed: {e}") from e
        err_console.print(
            f"Stored {inserted} new of {len(result.transactions)} transactions", highlight=False
        )

    if output_format is OutputFormat.TABLE:
        stats = result.stats
        title = (
            f"{len(result.transactions)} transactions "
            f"({stats.skipped} rows skipped, {stats.failed} failed)"
        )
        console.print(_transactions_table(result.transactions, title))
        return

    if output_format is OutputFormat.CSV:
        text = transactions_to_csv(result.transactions)
    else:
        text = dump_json(result.transactions)

    if output is None:
        typer.echo(text, nl=not text.endswith("\n"))
        return
    try:
        output.write_text(text, encoding="utf-8")
    except OSError as e:
        raise _fail(f"could not write {output}: {e}") from e
    err_console.print(f"Wrote {len(result.transactions)} transactions to {output}", highlight=False)


@app.command("banks")
def banks_cmd() -> None:
    """List supported banks and the file types each accepts."""

    table = Table(title="Supported banks")
    table.add_column("Code", no_wrap=True)
    table.add_column("Bank")
    table.add_column("Formats")
    for spec in supported_banks():
        formats = "PDF, XLSX, CSV" if spec.accepts_pdf else "XLSX, CSV"
        table.add_row(spec.bank.value, spec.display_name, formats)
    console.print(table)


@app.callback()
def _root(
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (falls back to WAKARU_LOG_LEVEL)."
    ),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)


if __name__ == "__main__":  # pragma: no cover - exercised via the console script
    app()
