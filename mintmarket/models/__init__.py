"""Mintmarket data models: all Pydantic v2, all frozen (immutable)."""

from mintmarket.models.assets import (
    VALID_TRANSITIONS,
    AssetRecord,
    Listing,
    ListingState,
)
from mintmarket.models.events import (
    EVENT_MODELS,
    EventKind,
    ListedEvent,
    MarketEvent,
    MintedEvent,
    SoldEvent,
)

__all__ = [
    # assets
    "AssetRecord",
    "Listing",
    "ListingState",
    "VALID_TRANSITIONS",
    # events
    "EventKind",
    "MarketEvent",
    "MintedEvent",
    "ListedEvent",
    "SoldEvent",
    "EVENT_MODELS",
]
