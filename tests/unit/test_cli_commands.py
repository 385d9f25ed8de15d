"""Unit tests for the CLI: Typer command registration and market flows.

Exercises the commands via typer.testing.CliRunner against a temp database.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from mintmarket.cli.app import app
from mintmarket.core.market_ledger import MarketLedger

runner = CliRunner()


@pytest.fixture
def db(tmp_path: Path) -> str:
    return str(tmp_path / "cli_market.db")


def invoke(*args: str):
    return runner.invoke(app, list(args))


# ---------------------------------------------------------------------------
# Test: CLI help and registration
# ---------------------------------------------------------------------------


class TestCliApp:
    """The CLI must register all expected commands and show help."""

    def test_help_flag(self):
        result = invoke("--help")
        assert result.exit_code == 0
        for name in ("mint", "list", "buy", "owner", "events"):
            assert name in result.output

    @pytest.mark.parametrize(
        "command",
        ["mint", "owner", "list", "buy", "listings", "deposit", "balance", "events"],
    )
    def test_command_exists(self, command: str):
        result = invoke(command, "--help")
        assert result.exit_code == 0


# ---------------------------------------------------------------------------
# Test: market flows through the CLI
# ---------------------------------------------------------------------------


class TestCliFlows:
    def test_mint_and_owner(self, db: str):
        result = invoke("mint", "alice", "ipfs://tokenURI", "--db", db)
        assert result.exit_code == 0, result.output
        assert "Minted" in result.output

        result = invoke("owner", "0", "--db", db)
        assert result.exit_code == 0
        assert "alice" in result.output

    def test_owner_of_unknown_asset(self, db: str):
        result = invoke("owner", "9", "--db", db)
        assert result.exit_code == 1
        assert "UnknownAsset" in result.output

    def test_list_and_buy(self, db: str):
        invoke("mint", "alice", "ipfs://tokenURI", "--db", db)
        invoke("deposit", "bob", "5", "--db", db)

        result = invoke("list", "alice", "0", "1.5", "--db", db)
        assert result.exit_code == 0, result.output

        result = invoke("buy", "bob", "0", "1.5", "--db", db)
        assert result.exit_code == 0, result.output
        assert "NFTSold" in result.output

        ledger = MarketLedger.open(Path(db))
        assert ledger.owner_of(0) == "bob"
        assert ledger.payments.balance_of("alice") == 15 * 10**17
        assert ledger.payments.balance_of("bob") == 35 * 10**17

    def test_list_by_non_owner(self, db: str):
        invoke("mint", "alice", "ipfs://tokenURI", "--db", db)
        result = invoke("list", "bob", "0", "1", "--db", db)
        assert result.exit_code == 1
        assert "You do not own this NFT" in result.output

    def test_buy_wrong_amount(self, db: str):
        invoke("mint", "alice", "ipfs://tokenURI", "--db", db)
        invoke("deposit", "bob", "5", "--db", db)
        invoke("list", "alice", "0", "1", "--db", db)
        result = invoke("buy", "bob", "0", "0.5", "--db", db)
        assert result.exit_code == 1
        assert "Incorrect value sent" in result.output

    def test_buy_unlisted(self, db: str):
        invoke("mint", "alice", "ipfs://tokenURI", "--db", db)
        result = invoke("buy", "bob", "0", "1", "--db", db)
        assert result.exit_code == 1
        assert "NFT is not for sale" in result.output

    def test_invalid_amount(self, db: str):
        invoke("mint", "alice", "ipfs://tokenURI", "--db", db)
        result = invoke("list", "alice", "0", "one", "--db", db)
        assert result.exit_code == 2

    def test_out_of_range_amount(self, db: str):
        invoke("mint", "alice", "ipfs://tokenURI", "--db", db)
        result = invoke("list", "alice", "0", "1e999999", "--db", db)
        assert result.exit_code == 2
        assert "out of range" in result.output

    def test_balance(self, db: str):
        invoke("deposit", "bob", "2.5", "--db", db)
        result = invoke("balance", "bob", "--db", db)
        assert result.exit_code == 0
        assert "2.5" in result.output

    def test_listings_and_events(self, db: str):
        invoke("mint", "alice", "ipfs://tokenURI", "--db", db)
        invoke("list", "alice", "0", "1", "--db", db)

        result = invoke("listings", "--db", db)
        assert result.exit_code == 0
        assert "alice" in result.output

        result = invoke("events", "--verify-chain", "--db", db)
        assert result.exit_code == 0
        assert "verified" in result.output
        assert "Listed" in result.output

    def test_events_unknown_kind(self, db: str):
        result = invoke("events", "--kind", "Burned", "--db", db)
        assert result.exit_code == 2
