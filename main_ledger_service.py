"""Mini README: Entry point CLI for the Memo Ledger service.

This script exposes a Typer CLI to start the FastAPI application, prepare the
SQLite database, and print a quick sales summary from the terminal. Settings
come from ``MEMOLEDGER_`` environment variables or a ``.env`` file.
"""

from __future__ import annotations

from typing import Optional

import typer
import uvicorn

from memoledger.configuration import get_settings
from memoledger.errors import LedgerError
from memoledger.ledger import LedgerStore, StatisticsAggregator
from memoledger.logging_utils import configure_root_logger

cli = typer.Typer(help="Run and inspect the Memo Ledger service.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # 0.0.0.0 and :: are bind addresses, not something a browser can open.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting Memo Ledger on {effective_host}:{effective_port}.\n"
        f"API docs at http://{browser_host}:{effective_port}/docs"
    )
    uvicorn.run(
        "memoledger.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command("init-db")
def init_db() -> None:
    """Create the ledger database and its tables if they do not exist."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    store = LedgerStore(settings.database_path)
    typer.echo(f"Ledger ready at {settings.database_path} ({store.count()} memos).")


@cli.command()
def stats(
    period: str = typer.Option("week", help="day, week, month or year."),
    start_date: Optional[str] = typer.Option(None, help="Explicit range start (YYYY-MM-DD)."),
    end_date: Optional[str] = typer.Option(None, help="Explicit range end (YYYY-MM-DD)."),
) -> None:
    """Print whole-ledger totals and daily sales for a period."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    aggregator = StatisticsAggregator(LedgerStore(settings.database_path))
    try:
        summary = aggregator.sales_stats(period=period, start_date=start_date, end_date=end_date)
    except LedgerError as error:
        typer.echo(f"Error: {error.message}", err=True)
        raise typer.Exit(code=1) from error

    typer.echo(f"Total sales:    {summary.total_sales:.2f}")
    typer.echo(f"Cash available: {summary.cash_available:.2f}")
    typer.echo(f"Total due:      {summary.total_due:.2f}")
    typer.echo(f"Daily sales {summary.start_date.isoformat()} .. {summary.end_date.isoformat()}:")
    for bucket in summary.period_sales:
        typer.echo(
            f"  {bucket.period}  sales={bucket.sales:.2f} paid={bucket.paid:.2f} due={bucket.due:.2f}"
        )


if __name__ == "__main__":
    cli()
