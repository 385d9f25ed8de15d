"""Shared helpers for the mintmarket CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console

from mintmarket.config import config
from mintmarket.core.errors import MarketError
from mintmarket.core.market_ledger import MarketLedger
from mintmarket.core.units import format_amount, parse_amount

console = Console()

DB_OPTION_HELP = "Path to the market SQLite database (default: MINTMARKET_DB_PATH)."


def open_ledger(db: str | None) -> MarketLedger:
    """Open the ledger at *db*, or at the configured path."""
    db_path = Path(db) if db else config.db_path
    return MarketLedger.open(db_path, timeout=config.lock_timeout_seconds)


def to_base_units(amount: str) -> int:
    """Parse a display amount from the command line, exiting on bad input."""
    try:
        return parse_amount(amount, config.unit_decimals)
    except ValueError as exc:
        console.print(f"[bold red]Invalid amount:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def show_amount(base_units: int) -> str:
    return f"{format_amount(base_units, config.unit_decimals)} {config.unit_symbol}"


def fail(exc: MarketError) -> NoReturn:
    """Print a market rejection with its stable code and exit 1."""
    console.print(f"[bold red]{exc.code}:[/bold red] {exc.message}")
    raise typer.Exit(code=1) from exc
