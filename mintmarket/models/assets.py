"""Asset and listing models: the per-asset record of owner and sale state."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ListingState(str, Enum):
    """Sale state of a single asset."""

    UNLISTED = "unlisted"
    LISTED = "listed"


# Valid listing transitions, enforced by MarketLedger.
# LISTED -> LISTED is a price replacement; LISTED -> UNLISTED only via buy.
VALID_TRANSITIONS: dict[ListingState, set[ListingState]] = {
    ListingState.UNLISTED: {ListingState.LISTED},
    ListingState.LISTED: {ListingState.LISTED, ListingState.UNLISTED},
}


class AssetRecord(BaseModel):
    """A minted asset.  ``metadata_uri`` is fixed at mint and never changes."""

    model_config = ConfigDict(frozen=True)

    asset_id: int = Field(ge=0)
    owner: str
    metadata_uri: str
    minted_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class Listing(BaseModel):
    """An active offer to sell ``asset_id`` for exactly ``price`` base units.

    The seller is always the asset's owner at listing time, which is also
    its current owner: ownership only changes through a sale, and a sale
    removes the listing.
    """

    model_config = ConfigDict(frozen=True)

    asset_id: int = Field(ge=0)
    seller: str
    price: int = Field(gt=0)
    listed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
