"""Market event models: the observable notifications of the ledger.

Events are emitted by ``mint``, ``list_for_sale`` and ``buy`` and sealed into
the hash-chained event log.  They are notifications only: the ledger never
reads them back to decide anything.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EventKind(str, Enum):
    """The three notifications a market can emit."""

    MINTED = "Minted"
    LISTED = "Listed"
    SOLD = "NFTSold"


class MarketEvent(BaseModel):
    """Base fields shared by all market events.

    ``account`` is the acting party: the minter, the lister, or the buyer.
    """

    model_config = ConfigDict(frozen=True)

    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    kind: EventKind
    asset_id: int
    account: str
    amount: int = 0
    counterparty: str = ""  # seller, for sales
    timestamp_utc: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    previous_event_hash: str = ""
    event_hash: str = ""  # computed on append, seals this event

    @property
    def args(self) -> tuple[int, str, int]:
        """The ``(asset_id, account, amount)`` triple observers key on."""
        return (self.asset_id, self.account, self.amount)


class MintedEvent(MarketEvent):
    """A new asset was minted to ``account``."""

    kind: EventKind = EventKind.MINTED


class ListedEvent(MarketEvent):
    """``account`` listed ``asset_id`` for ``amount`` base units."""

    kind: EventKind = EventKind.LISTED


class SoldEvent(MarketEvent):
    """``account`` bought ``asset_id`` from ``counterparty`` for ``amount``."""

    kind: EventKind = EventKind.SOLD


EVENT_MODELS: dict[EventKind, type[MarketEvent]] = {
    EventKind.MINTED: MintedEvent,
    EventKind.LISTED: ListedEvent,
    EventKind.SOLD: SoldEvent,
}
