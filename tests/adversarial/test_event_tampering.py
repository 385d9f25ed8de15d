"""Adversarial tests: event log tampering and chain integrity.

Direct SQLite manipulation simulates an attacker with database access
rewriting the sale history.
"""

from __future__ import annotations

import sqlite3

import pytest

from market_accounts import ADDR1
from mintmarket.core.event_log import EventLogIntegrityError
from mintmarket.core.market_ledger import MarketLedger


@pytest.fixture
def sold_ledger(funded_ledger: MarketLedger, listed_asset: int,
                listing_price: int) -> MarketLedger:
    """A ledger with Minted, Listed and NFTSold events recorded."""
    funded_ledger.buy(ADDR1, listed_asset, listing_price)
    return funded_ledger


def tamper(ledger: MarketLedger, sql: str, params: tuple = ()) -> None:
    conn = sqlite3.connect(str(ledger._store.db_path))
    conn.execute(sql, params)
    conn.commit()
    conn.close()


class TestEventTamperDetection:
    def test_untouched_chain_verifies(self, sold_ledger: MarketLedger):
        assert sold_ledger.events.verify_chain() is True

    def test_rewritten_sale_amount_detected(self, sold_ledger: MarketLedger):
        tamper(sold_ledger, "UPDATE market_events SET amount = '1' WHERE kind = 'NFTSold'")
        with pytest.raises(EventLogIntegrityError, match="Tampered"):
            sold_ledger.events.verify_chain()

    def test_rewritten_buyer_detected(self, sold_ledger: MarketLedger):
        tamper(
            sold_ledger,
            "UPDATE market_events SET account = ? WHERE kind = 'NFTSold'",
            ("0xmallory",),
        )
        with pytest.raises(EventLogIntegrityError, match="Tampered"):
            sold_ledger.events.verify_chain()

    def test_deleted_event_breaks_chain(self, sold_ledger: MarketLedger):
        tamper(sold_ledger, "DELETE FROM market_events WHERE kind = 'Listed'")
        with pytest.raises(EventLogIntegrityError, match="Chain broken"):
            sold_ledger.events.verify_chain()

    def test_corrupted_event_hash_detected(self, sold_ledger: MarketLedger):
        tamper(
            sold_ledger,
            "UPDATE market_events SET event_hash = 'TAMPERED' WHERE kind = 'Minted'",
        )
        with pytest.raises(EventLogIntegrityError, match="(Chain broken|Tampered)"):
            sold_ledger.events.verify_chain()
