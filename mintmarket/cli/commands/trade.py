"""``mintmarket list``, ``buy`` and ``listings``: the sale commands.

Amounts are given in display units (e.g. ``1.5``) and converted to base
units with the configured number of decimals.
"""

from __future__ import annotations

import typer
from rich.table import Table

from mintmarket.cli.commands._shared import (
    DB_OPTION_HELP,
    console,
    fail,
    open_ledger,
    show_amount,
    to_base_units,
)
from mintmarket.core.errors import MarketError


def list_cmd(
    caller: str = typer.Argument(..., help="Account listing the asset (must own it)."),
    asset_id: int = typer.Argument(..., help="Asset id to list."),
    price: str = typer.Argument(..., help="Asking price in display units."),
    db: str = typer.Option(None, "--db", "-d", help=DB_OPTION_HELP),
) -> None:
    """List ASSET_ID for sale at PRICE, replacing any active listing."""
    ledger = open_ledger(db)
    try:
        event = ledger.list_for_sale(caller, asset_id, to_base_units(price))
    except MarketError as exc:
        fail(exc)
    console.print(
        f"[green]Listed[/green] asset {event.asset_id} by {event.account} "
        f"at {show_amount(event.amount)}"
    )


def buy_cmd(
    caller: str = typer.Argument(..., help="Buying account."),
    asset_id: int = typer.Argument(..., help="Asset id to buy."),
    payment: str = typer.Argument(..., help="Payment in display units; must equal the price."),
    db: str = typer.Option(None, "--db", "-d", help=DB_OPTION_HELP),
) -> None:
    """Buy ASSET_ID by sending exactly its listing price."""
    ledger = open_ledger(db)
    try:
        event = ledger.buy(caller, asset_id, to_base_units(payment))
    except MarketError as exc:
        fail(exc)
    console.print(
        f"[green]NFTSold[/green] asset {event.asset_id} to {event.account} "
        f"from {event.counterparty} for {show_amount(event.amount)}"
    )


def listings_cmd(
    db: str = typer.Option(None, "--db", "-d", help=DB_OPTION_HELP),
) -> None:
    """Show every active listing."""
    listings = open_ledger(db).active_listings()
    if not listings:
        console.print("[dim]No assets are listed for sale.[/dim]")
        return

    table = Table(title="Active Listings")
    table.add_column("Asset", justify="right", style="cyan")
    table.add_column("Seller")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Listed At", style="dim")
    for listing in listings:
        table.add_row(
            str(listing.asset_id),
            listing.seller,
            show_amount(listing.price),
            listing.listed_at.strftime("%Y-%m-%d %H:%M:%S"),
        )
    console.print(table)
