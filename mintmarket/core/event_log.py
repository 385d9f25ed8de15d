"""Append-only, hash-chained market event log.

Design:
- Append-only: only ``append()`` writes; no update, no delete.
- Hash-chained: each event includes the SHA-256 of the previous event.
- Appended inside the operation's transaction, so a rolled-back call
  leaves no event behind.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime

from mintmarket.core.hasher import compute_event_hash
from mintmarket.core.store import MarketStore
from mintmarket.models.events import EVENT_MODELS, EventKind, MarketEvent

logger = logging.getLogger(__name__)

_SELECT_COLUMNS = (
    "event_id, kind, asset_id, account, amount, counterparty, "
    "timestamp_utc, previous_event_hash, event_hash"
)


class EventLogIntegrityError(RuntimeError):
    """Raised when the event hash chain is broken."""


class EventLog:
    """Hash-chained record of every committed market notification.

    Parameters
    ----------
    store:
        The shared market store.
    """

    def __init__(self, store: MarketStore) -> None:
        self._store = store

    # ------------------------------------------------------------------
    # Core: append-only write
    # ------------------------------------------------------------------

    def append(self, conn: sqlite3.Connection, event: MarketEvent) -> MarketEvent:
        """Seal *event* onto the chain inside *conn*'s transaction.

        Returns the event with ``previous_event_hash`` and ``event_hash`` set.
        """
        previous_hash = self._get_latest_hash(conn)

        event_dict = event.model_dump(mode="json")
        event_dict["previous_event_hash"] = previous_hash
        event_dict["event_hash"] = ""
        event_hash = compute_event_hash(event_dict)

        sealed = event.model_copy(
            update={
                "previous_event_hash": previous_hash,
                "event_hash": event_hash,
            }
        )
        conn.execute(
            f"INSERT INTO market_events ({_SELECT_COLUMNS}) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                sealed.event_id,
                sealed.kind.value,
                sealed.asset_id,
                sealed.account,
                str(sealed.amount),
                sealed.counterparty,
                sealed.timestamp_utc.isoformat()
                if isinstance(sealed.timestamp_utc, datetime)
                else sealed.timestamp_utc,
                sealed.previous_event_hash,
                sealed.event_hash,
            ),
        )
        return sealed

    @staticmethod
    def _get_latest_hash(conn: sqlite3.Connection) -> str:
        row = conn.execute(
            "SELECT event_hash FROM market_events ORDER BY id DESC LIMIT 1"
        ).fetchone()
        return row[0] if row else ""

    # ------------------------------------------------------------------
    # Query methods (read-only)
    # ------------------------------------------------------------------

    def get_events(
        self,
        asset_id: int | None = None,
        kind: EventKind | None = None,
    ) -> list[MarketEvent]:
        """Return events in append order, optionally filtered."""
        clauses: list[str] = []
        params: list[object] = []
        if asset_id is not None:
            clauses.append("asset_id = ?")
            params.append(asset_id)
        if kind is not None:
            clauses.append("kind = ?")
            params.append(kind.value)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""

        with self._store.read() as db:
            rows = db.execute(
                f"SELECT {_SELECT_COLUMNS} FROM market_events{where} ORDER BY id ASC",
                params,
            ).fetchall()
        return [self._row_to_event(row) for row in rows]

    def get_latest(self) -> MarketEvent | None:
        with self._store.read() as db:
            row = db.execute(
                f"SELECT {_SELECT_COLUMNS} FROM market_events ORDER BY id DESC LIMIT 1"
            ).fetchone()
        return self._row_to_event(row) if row else None

    # ------------------------------------------------------------------
    # Chain verification
    # ------------------------------------------------------------------

    def verify_chain(self) -> bool:
        """Walk every event, recompute its hash and check the links.

        Returns True if the chain is valid, raises EventLogIntegrityError otherwise.
        """
        prev_hash = ""
        for event in self.get_events():
            if event.previous_event_hash != prev_hash:
                raise EventLogIntegrityError(
                    f"Chain broken at event {event.event_id}: "
                    f"expected previous_hash={prev_hash!r}, "
                    f"got {event.previous_event_hash!r}"
                )

            expected_hash = compute_event_hash(event.model_dump(mode="json"))
            if event.event_hash != expected_hash:
                raise EventLogIntegrityError(
                    f"Tampered event {event.event_id}: "
                    f"expected hash={expected_hash!r}, "
                    f"got {event.event_hash!r}"
                )

            prev_hash = event.event_hash

        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _row_to_event(row: tuple) -> MarketEvent:
        (
            event_id,
            kind,
            asset_id,
            account,
            amount,
            counterparty,
            timestamp_utc,
            previous_event_hash,
            event_hash,
        ) = row
        model = EVENT_MODELS[EventKind(kind)]
        return model(
            event_id=event_id,
            asset_id=asset_id,
            account=account,
            amount=int(amount),
            counterparty=counterparty,
            timestamp_utc=timestamp_utc,
            previous_event_hash=previous_event_hash,
            event_hash=event_hash,
        )
