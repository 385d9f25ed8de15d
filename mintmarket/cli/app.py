"""Main Typer application: imports and registers all CLI commands.

Entry point: ``mintmarket`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from mintmarket.cli.commands.assets import mint_cmd, owner_cmd
from mintmarket.cli.commands.events_cmd import events_cmd
from mintmarket.cli.commands.funds import balance_cmd, deposit_cmd
from mintmarket.cli.commands.trade import buy_cmd, list_cmd, listings_cmd
from mintmarket.config import config

app = typer.Typer(
    name="mintmarket",
    help="Mintmarket: mint, list and buy uniquely identified assets.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def _configure(
    log_level: str = typer.Option(
        None, "--log-level", help="Logging level (default: MINTMARKET_LOG_LEVEL)."
    ),
) -> None:
    """Mintmarket: mint, list and buy uniquely identified assets."""
    level = (log_level or config.log_level).upper()
    if config.debug:
        level = "DEBUG"
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(show_path=config.debug, rich_tracebacks=True)],
        force=True,
    )


# Register subcommands
app.command(name="mint", help="Mint a new asset.")(mint_cmd)
app.command(name="owner", help="Show the current owner of an asset.")(owner_cmd)
app.command(name="list", help="List an asset for sale at a fixed price.")(list_cmd)
app.command(name="buy", help="Buy a listed asset for its exact price.")(buy_cmd)
app.command(name="listings", help="Show active listings.")(listings_cmd)
app.command(name="deposit", help="Credit funds to an account.")(deposit_cmd)
app.command(name="balance", help="Show an account's balance.")(balance_cmd)
app.command(name="events", help="Show the market event log.")(events_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
