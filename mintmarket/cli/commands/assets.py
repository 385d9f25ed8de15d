"""``mintmarket mint`` and ``mintmarket owner``: asset registry commands."""

from __future__ import annotations

import typer
from rich.panel import Panel

from mintmarket.cli.commands._shared import (
    DB_OPTION_HELP,
    console,
    fail,
    open_ledger,
)
from mintmarket.core.errors import MarketError


def mint_cmd(
    minter: str = typer.Argument(..., help="Account that will own the new asset."),
    metadata_uri: str = typer.Argument(..., help="Metadata reference, e.g. ipfs://..."),
    db: str = typer.Option(None, "--db", "-d", help=DB_OPTION_HELP),
) -> None:
    """Mint a new asset owned by MINTER."""
    ledger = open_ledger(db)
    try:
        record = ledger.mint(minter, metadata_uri)
    except ValueError as exc:
        console.print(f"[bold red]Cannot mint:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    console.print(
        Panel(
            "\n".join([
                f"[bold]Asset ID:[/bold]  {record.asset_id}",
                f"[bold]Owner:[/bold]     {record.owner}",
                f"[bold]Metadata:[/bold]  {record.metadata_uri}",
            ]),
            title="[bold green]Minted[/bold green]",
            border_style="green",
        )
    )
    # Print the asset id plainly for scripting
    console.print(f"[bold]{record.asset_id}[/bold]")


def owner_cmd(
    asset_id: int = typer.Argument(..., help="Asset id to look up."),
    db: str = typer.Option(None, "--db", "-d", help=DB_OPTION_HELP),
) -> None:
    """Show the current owner of ASSET_ID."""
    ledger = open_ledger(db)
    try:
        owner = ledger.owner_of(asset_id)
    except MarketError as exc:
        fail(exc)
    console.print(owner)
