"""``mintmarket deposit`` and ``mintmarket balance``: payment channel commands."""

from __future__ import annotations

import typer

from mintmarket.cli.commands._shared import (
    DB_OPTION_HELP,
    console,
    open_ledger,
    show_amount,
    to_base_units,
)


def deposit_cmd(
    account: str = typer.Argument(..., help="Account to credit."),
    amount: str = typer.Argument(..., help="Amount in display units."),
    db: str = typer.Option(None, "--db", "-d", help=DB_OPTION_HELP),
) -> None:
    """Credit AMOUNT to ACCOUNT."""
    ledger = open_ledger(db)
    try:
        balance = ledger.payments.deposit(account, to_base_units(amount))
    except ValueError as exc:
        console.print(f"[bold red]Cannot deposit:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    console.print(f"{account}: {show_amount(balance)}")


def balance_cmd(
    account: str = typer.Argument(..., help="Account to inspect."),
    db: str = typer.Option(None, "--db", "-d", help=DB_OPTION_HELP),
) -> None:
    """Show the balance of ACCOUNT and how many assets it holds."""
    ledger = open_ledger(db)
    balance = ledger.payments.balance_of(account)
    held = ledger.registry.count_owned(account)
    console.print(f"{account}: {show_amount(balance)}, {held} asset(s)")
