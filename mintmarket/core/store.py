"""SQLite-backed market store: one database, one transaction per operation.

Every mutating market operation runs inside ``MarketStore.transaction()``:
a ``BEGIN IMMEDIATE`` transaction that commits when the block exits cleanly
and rolls back on any exception.  This is the atomic read-modify-write the
ledger relies on; a rejected ``buy`` leaves no trace in any table.

Design:
- Amounts are stored as decimal TEXT; base-unit values overflow INTEGER.
- WAL journal mode for concurrent readers.
- Writers are serialized by the IMMEDIATE lock.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

_CREATE_ASSETS = """
CREATE TABLE IF NOT EXISTS assets (
    asset_id      INTEGER PRIMARY KEY,
    owner         TEXT NOT NULL,
    metadata_uri  TEXT NOT NULL,
    minted_at     TEXT NOT NULL
);
"""

_CREATE_IDX_OWNER = """
CREATE INDEX IF NOT EXISTS idx_assets_owner ON assets(owner, asset_id);
"""

_CREATE_LISTINGS = """
CREATE TABLE IF NOT EXISTS listings (
    asset_id   INTEGER PRIMARY KEY REFERENCES assets(asset_id),
    seller     TEXT NOT NULL,
    price      TEXT NOT NULL,
    listed_at  TEXT NOT NULL
);
"""

_CREATE_ACCOUNTS = """
CREATE TABLE IF NOT EXISTS accounts (
    account           TEXT PRIMARY KEY,
    balance           TEXT NOT NULL DEFAULT '0',
    accepts_payments  INTEGER NOT NULL DEFAULT 1
);
"""

_CREATE_EVENTS = """
CREATE TABLE IF NOT EXISTS market_events (
    id                   INTEGER PRIMARY KEY AUTOINCREMENT,
    event_id             TEXT NOT NULL UNIQUE,
    kind                 TEXT NOT NULL,
    asset_id             INTEGER NOT NULL,
    account              TEXT NOT NULL,
    amount               TEXT NOT NULL DEFAULT '0',
    counterparty         TEXT NOT NULL DEFAULT '',
    timestamp_utc        TEXT NOT NULL,
    previous_event_hash  TEXT NOT NULL DEFAULT '',
    event_hash           TEXT NOT NULL UNIQUE
);
"""

_CREATE_IDX_EVENT_ASSET = """
CREATE INDEX IF NOT EXISTS idx_events_asset ON market_events(asset_id, id);
"""


class MarketStore:
    """Owns the SQLite database shared by registry, payments and event log.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file. Created if it does not exist.
    timeout:
        Seconds a writer waits for the database lock before failing.
    """

    def __init__(self, db_path: Path, timeout: float = 5.0) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._timeout = timeout
        self._init_schema()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        # isolation_level=None: transactions are opened explicitly below.
        conn = sqlite3.connect(
            str(self._db_path),
            timeout=self._timeout,
            isolation_level=None,
            check_same_thread=False,
        )
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    def _init_schema(self) -> None:
        with self.transaction() as conn:
            conn.execute(_CREATE_ASSETS)
            conn.execute(_CREATE_IDX_OWNER)
            conn.execute(_CREATE_LISTINGS)
            conn.execute(_CREATE_ACCOUNTS)
            conn.execute(_CREATE_EVENTS)
            conn.execute(_CREATE_IDX_EVENT_ASSET)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run a block as one atomic write transaction.

        Commits on clean exit.  Any exception rolls back every statement
        executed in the block and is re-raised unchanged.
        """
        conn = self._connect()
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                conn.execute("ROLLBACK")
                logger.debug("Rolled back market transaction on %s.", self._db_path)
                raise
            conn.execute("COMMIT")
        finally:
            conn.close()

    @contextmanager
    def joined(
        self, conn: sqlite3.Connection | None
    ) -> Iterator[sqlite3.Connection]:
        """Join the caller's open transaction, or start a new one."""
        if conn is not None:
            yield conn
            return
        with self.transaction() as own:
            yield own

    @contextmanager
    def read(
        self, conn: sqlite3.Connection | None = None
    ) -> Iterator[sqlite3.Connection]:
        """Open a connection for read-only queries (or reuse *conn*)."""
        if conn is not None:
            yield conn
            return
        own = self._connect()
        try:
            yield own
        finally:
            own.close()
