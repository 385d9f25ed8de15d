"""``mintmarket events``: show the market event log.

Optionally verifies the hash chain before displaying.
"""

from __future__ import annotations

import typer
from rich.table import Table

from mintmarket.cli.commands._shared import (
    DB_OPTION_HELP,
    console,
    open_ledger,
    show_amount,
)
from mintmarket.core.event_log import EventLogIntegrityError
from mintmarket.models.events import EventKind


def events_cmd(
    asset_id: int = typer.Option(None, "--asset", "-a", help="Only events for this asset."),
    kind: str = typer.Option(None, "--kind", "-k", help="Minted, Listed or NFTSold."),
    verify_chain: bool = typer.Option(
        False,
        "--verify-chain",
        "-V",
        help="Verify the hash chain integrity before displaying.",
    ),
    db: str = typer.Option(None, "--db", "-d", help=DB_OPTION_HELP),
) -> None:
    """Show market events in the order they were committed."""
    ledger = open_ledger(db)

    if verify_chain:
        try:
            ledger.events.verify_chain()
        except EventLogIntegrityError as exc:
            console.print(f"[bold red]Chain verification failed:[/bold red] {exc}")
            raise typer.Exit(code=1) from exc
        console.print("[bold green]Event chain verified.[/bold green]")

    try:
        kind_filter = EventKind(kind) if kind else None
    except ValueError as exc:
        console.print(f"[bold red]Unknown event kind:[/bold red] {kind}")
        raise typer.Exit(code=2) from exc

    events = ledger.events.get_events(asset_id=asset_id, kind=kind_filter)
    if not events:
        console.print("[dim]No market events recorded.[/dim]")
        return

    table = Table(title="Market Events")
    table.add_column("Event", style="cyan")
    table.add_column("Asset", justify="right")
    table.add_column("Account")
    table.add_column("Amount", justify="right", style="green")
    table.add_column("Hash", style="dim")
    for event in events:
        table.add_row(
            event.kind.value,
            str(event.asset_id),
            event.account,
            show_amount(event.amount) if event.amount else "",
            event.event_hash[:12],
        )
    console.print(table)
