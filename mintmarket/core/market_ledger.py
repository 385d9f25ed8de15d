"""Marketplace Ledger: the listing/purchase state machine.

Enforces:
- Only the current owner may list, and only at a positive price
- At most one listing per asset; re-listing replaces the price
- ``buy`` needs an active listing and an exact payment
- Ownership, listing removal, funds and the ``NFTSold`` event commit as one
  transaction or not at all

Every precondition is checked before the first write, and every write runs
inside one ``MarketStore`` transaction, so a failed call leaves owner,
listing and balances exactly as they were.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from mintmarket.core.asset_registry import AssetRegistry
from mintmarket.core.errors import (
    IncorrectPaymentError,
    InvalidPriceError,
    NotForSaleError,
    NotOwnerError,
)
from mintmarket.core.event_log import EventLog
from mintmarket.core.payment_channel import PaymentChannel
from mintmarket.core.store import MarketStore
from mintmarket.models.assets import (
    VALID_TRANSITIONS,
    AssetRecord,
    Listing,
    ListingState,
)
from mintmarket.models.events import ListedEvent, MintedEvent, SoldEvent

logger = logging.getLogger(__name__)


class MarketLedger:
    """Mints, lists and sells assets against a single market store.

    Parameters
    ----------
    store:
        The shared market store.
    registry, payments, events:
        Collaborators; built on *store* when not supplied.

    Examples
    --------
    >>> ledger = MarketLedger.open(Path("/tmp/mm_doc/market.db"))
    >>> asset = ledger.mint("alice", "ipfs://tokenURI")
    >>> ledger.owner_of(asset.asset_id)
    'alice'
    """

    def __init__(
        self,
        store: MarketStore,
        registry: AssetRegistry | None = None,
        payments: PaymentChannel | None = None,
        events: EventLog | None = None,
    ) -> None:
        self._store = store
        self.registry = registry or AssetRegistry(store)
        self.payments = payments or PaymentChannel(store)
        self.events = events or EventLog(store)

    @classmethod
    def open(cls, db_path: Path, timeout: float = 5.0) -> MarketLedger:
        """Build a ledger and its collaborators on the database at *db_path*."""
        return cls(MarketStore(db_path, timeout=timeout))

    # ------------------------------------------------------------------
    # Mint
    # ------------------------------------------------------------------

    def mint(self, minter: str, metadata_uri: str) -> AssetRecord:
        """Mint a fresh asset owned by *minter*, with no listing."""
        with self._store.transaction() as tx:
            record = self.registry.mint(minter, metadata_uri, conn=tx)
            self.events.append(
                tx,
                MintedEvent(asset_id=record.asset_id, account=minter),
            )
        logger.info("Asset %d minted to '%s'.", record.asset_id, minter)
        return record

    # ------------------------------------------------------------------
    # List
    # ------------------------------------------------------------------

    def list_for_sale(self, caller: str, asset_id: int, price: int) -> ListedEvent:
        """List *asset_id* at *price* base units, replacing any active listing.

        Raises
        ------
        UnknownAssetError
            If the asset was never minted.
        NotOwnerError
            If *caller* is not the current owner.
        InvalidPriceError
            If *price* is not a positive integer.
        """
        with self._store.transaction() as tx:
            owner = self.registry.owner_of(asset_id, conn=tx)
            if caller != owner:
                raise NotOwnerError(asset_id=asset_id, caller=caller)
            if isinstance(price, bool) or not isinstance(price, int) or price <= 0:
                raise InvalidPriceError(
                    f"Price must be a positive integer amount, got {price!r}",
                    asset_id=asset_id, price=price,
                )

            current = self._listing_state(tx, asset_id)

            tx.execute(
                "INSERT INTO listings (asset_id, seller, price, listed_at) "
                "VALUES (?, ?, ?, ?) "
                "ON CONFLICT(asset_id) DO UPDATE SET "
                "price = excluded.price, listed_at = excluded.listed_at",
                (
                    asset_id,
                    owner,
                    str(price),
                    datetime.now(timezone.utc).isoformat(),
                ),
            )
            event = self.events.append(
                tx,
                ListedEvent(asset_id=asset_id, account=caller, amount=price),
            )

        logger.info(
            "Asset %d listed by '%s' at %d (%s).",
            asset_id, caller, price,
            "replaced" if current == ListingState.LISTED else "new",
        )
        return event

    # ------------------------------------------------------------------
    # Buy
    # ------------------------------------------------------------------

    def buy(self, caller: str, asset_id: int, payment: int) -> SoldEvent:
        """Buy *asset_id* by paying exactly its listing price.

        The seller is resolved, ownership moves to *caller*, the listing
        is removed, the payment moves from *caller* to the seller and the
        ``NFTSold`` event is recorded, all in one transaction.

        Raises
        ------
        NotForSaleError
            If the asset has no active listing.
        IncorrectPaymentError
            If *payment* differs from the listing price.
        PaymentFailedError
            If the payment channel cannot move the funds; nothing commits.
        """
        with self._store.transaction() as tx:
            listing = self._get_listing(tx, asset_id)
            if not self._can_transition(listing, ListingState.UNLISTED):
                raise NotForSaleError(asset_id=asset_id, caller=caller)
            if payment != listing.price:
                raise IncorrectPaymentError(
                    asset_id=asset_id, expected=listing.price, sent=payment
                )

            seller = self.registry.owner_of(asset_id, conn=tx)
            self.registry.set_owner(tx, asset_id, caller)
            tx.execute("DELETE FROM listings WHERE asset_id = ?", (asset_id,))
            self.payments.transfer(tx, caller, seller, listing.price)
            event = self.events.append(
                tx,
                SoldEvent(
                    asset_id=asset_id,
                    account=caller,
                    amount=listing.price,
                    counterparty=seller,
                ),
            )

        logger.info(
            "Asset %d sold by '%s' to '%s' for %d.", asset_id, seller, caller, payment
        )
        return event

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def owner_of(self, asset_id: int) -> str:
        """Current owner of *asset_id*; raises ``UnknownAssetError``."""
        return self.registry.owner_of(asset_id)

    def get_asset(self, asset_id: int) -> AssetRecord:
        return self.registry.get_asset(asset_id)

    def get_listing(self, asset_id: int) -> Listing | None:
        """The active listing for *asset_id*, or ``None``."""
        with self._store.read() as db:
            return self._get_listing(db, asset_id)

    def listing_state(self, asset_id: int) -> ListingState:
        with self._store.read() as db:
            return self._listing_state(db, asset_id)

    def active_listings(self) -> list[Listing]:
        """All active listings, by asset id."""
        with self._store.read() as db:
            rows = db.execute(
                "SELECT asset_id, seller, price, listed_at "
                "FROM listings ORDER BY asset_id ASC"
            ).fetchall()
        return [self._row_to_listing(row) for row in rows]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get_listing(self, conn: sqlite3.Connection, asset_id: int) -> Listing | None:
        row = conn.execute(
            "SELECT asset_id, seller, price, listed_at FROM listings WHERE asset_id = ?",
            (asset_id,),
        ).fetchone()
        return self._row_to_listing(row) if row else None

    def _listing_state(self, conn: sqlite3.Connection, asset_id: int) -> ListingState:
        if self._get_listing(conn, asset_id) is None:
            return ListingState.UNLISTED
        return ListingState.LISTED

    @staticmethod
    def _can_transition(listing: Listing | None, target: ListingState) -> bool:
        current = ListingState.UNLISTED if listing is None else ListingState.LISTED
        return target in VALID_TRANSITIONS[current]

    @staticmethod
    def _row_to_listing(row: tuple) -> Listing:
        asset_id, seller, price, listed_at = row
        return Listing(
            asset_id=asset_id,
            seller=seller,
            price=int(price),
            listed_at=listed_at,
        )
