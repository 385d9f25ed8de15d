"""Asset Registry: owner-of-record and immutable metadata per asset id.

Identifiers are assigned from 0 upward in mint order and never reused;
assets are never deleted, so ``MAX(asset_id) + 1`` is always fresh.
Ownership changes only through ``set_owner``, which only the ledger's
``buy`` calls from inside its own transaction.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone

from mintmarket.core.errors import UnknownAssetError
from mintmarket.core.store import MarketStore
from mintmarket.models.assets import AssetRecord

logger = logging.getLogger(__name__)


class AssetRegistry:
    """Mints assets and answers ownership queries.

    Parameters
    ----------
    store:
        The shared market store.

    Every method takes an optional ``conn``; when given, the work joins
    that open transaction instead of starting its own.
    """

    def __init__(self, store: MarketStore) -> None:
        self._store = store

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def mint(
        self,
        owner: str,
        metadata_uri: str,
        conn: sqlite3.Connection | None = None,
    ) -> AssetRecord:
        """Allocate a fresh asset id owned by *owner*.

        Raises
        ------
        ValueError
            If *owner* or *metadata_uri* is empty.
        """
        if not owner:
            raise ValueError("Asset owner must be a non-empty account reference.")
        if not metadata_uri:
            raise ValueError("Asset metadata reference must be non-empty.")

        with self._store.joined(conn) as tx:
            row = tx.execute(
                "SELECT COALESCE(MAX(asset_id) + 1, 0) FROM assets"
            ).fetchone()
            record = AssetRecord(
                asset_id=row[0],
                owner=owner,
                metadata_uri=metadata_uri,
                minted_at=datetime.now(timezone.utc),
            )
            tx.execute(
                "INSERT INTO assets (asset_id, owner, metadata_uri, minted_at) "
                "VALUES (?, ?, ?, ?)",
                (
                    record.asset_id,
                    record.owner,
                    record.metadata_uri,
                    record.minted_at.isoformat(),
                ),
            )
        logger.debug("Minted asset %d to '%s'.", record.asset_id, owner)
        return record

    def set_owner(
        self, conn: sqlite3.Connection, asset_id: int, new_owner: str
    ) -> None:
        """Reassign ownership inside an open transaction.

        Only ``MarketLedger.buy`` calls this; it requires *conn* so the
        change can never commit apart from the sale that caused it.
        """
        cursor = conn.execute(
            "UPDATE assets SET owner = ? WHERE asset_id = ?",
            (new_owner, asset_id),
        )
        if cursor.rowcount != 1:
            raise UnknownAssetError(
                f"Unknown asset {asset_id}", asset_id=asset_id
            )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_asset(
        self, asset_id: int, conn: sqlite3.Connection | None = None
    ) -> AssetRecord:
        """Return the record for *asset_id*, or raise ``UnknownAssetError``."""
        with self._store.read(conn) as db:
            row = db.execute(
                "SELECT asset_id, owner, metadata_uri, minted_at "
                "FROM assets WHERE asset_id = ?",
                (asset_id,),
            ).fetchone()
        if row is None:
            raise UnknownAssetError(
                f"Unknown asset {asset_id}", asset_id=asset_id
            )
        return self._row_to_asset(row)

    def owner_of(
        self, asset_id: int, conn: sqlite3.Connection | None = None
    ) -> str:
        return self.get_asset(asset_id, conn).owner

    def metadata_uri(self, asset_id: int) -> str:
        """The metadata reference fixed at mint (``tokenURI``)."""
        return self.get_asset(asset_id).metadata_uri

    def count_owned(self, owner: str) -> int:
        """Number of assets currently held by *owner* (``balanceOf``)."""
        with self._store.read() as db:
            row = db.execute(
                "SELECT COUNT(*) FROM assets WHERE owner = ?", (owner,)
            ).fetchone()
        return row[0]

    def assets_of(self, owner: str) -> list[AssetRecord]:
        """All assets currently held by *owner*, by id."""
        with self._store.read() as db:
            rows = db.execute(
                "SELECT asset_id, owner, metadata_uri, minted_at "
                "FROM assets WHERE owner = ? ORDER BY asset_id ASC",
                (owner,),
            ).fetchall()
        return [self._row_to_asset(row) for row in rows]

    def total_minted(self) -> int:
        with self._store.read() as db:
            row = db.execute("SELECT COUNT(*) FROM assets").fetchone()
        return row[0]

    @staticmethod
    def _row_to_asset(row: tuple) -> AssetRecord:
        asset_id, owner, metadata_uri, minted_at = row
        return AssetRecord(
            asset_id=asset_id,
            owner=owner,
            metadata_uri=metadata_uri,
            minted_at=minted_at,
        )
