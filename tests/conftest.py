"""Shared test fixtures for Mintmarket."""

from __future__ import annotations

from pathlib import Path

import pytest
from market_accounts import ADDR1, ADDR2, OWNER

from mintmarket.core.asset_registry import AssetRegistry
from mintmarket.core.event_log import EventLog
from mintmarket.core.market_ledger import MarketLedger
from mintmarket.core.payment_channel import PaymentChannel
from mintmarket.core.store import MarketStore
from mintmarket.core.units import parse_amount


@pytest.fixture
def store(tmp_path: Path) -> MarketStore:
    """Provide a fresh MarketStore backed by a temp SQLite database."""
    return MarketStore(tmp_path / "market.db")


@pytest.fixture
def registry(store: MarketStore) -> AssetRegistry:
    return AssetRegistry(store)


@pytest.fixture
def payments(store: MarketStore) -> PaymentChannel:
    return PaymentChannel(store)


@pytest.fixture
def event_log(store: MarketStore) -> EventLog:
    return EventLog(store)


@pytest.fixture
def ledger(store: MarketStore) -> MarketLedger:
    """Provide a MarketLedger wired to the test store."""
    return MarketLedger(store)


@pytest.fixture
def listing_price() -> int:
    """One display unit (1 ETH) in base units."""
    return parse_amount("1")


@pytest.fixture
def funded_ledger(ledger: MarketLedger) -> MarketLedger:
    """A ledger where owner, addr1 and addr2 each hold 10 units."""
    for account in (OWNER, ADDR1, ADDR2):
        ledger.payments.deposit(account, parse_amount("10"))
    return ledger


@pytest.fixture
def listed_asset(funded_ledger: MarketLedger, listing_price: int) -> int:
    """Mint asset 0 to OWNER and list it at ``listing_price``."""
    record = funded_ledger.mint(OWNER, "ipfs://tokenURI")
    funded_ledger.list_for_sale(OWNER, record.asset_id, listing_price)
    return record.asset_id
