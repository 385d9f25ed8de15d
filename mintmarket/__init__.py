"""Mintmarket: a minimal digital-asset marketplace ledger.

Mint a uniquely identified asset, list it at a fixed price, and sell it to
a buyer who sends the exact price.  Ownership, listing removal and payment
commit together or not at all.
"""

__version__ = "0.1.0"
__description__ = "Minimal digital-asset marketplace with atomic sales"

from mintmarket.core.errors import (
    IncorrectPaymentError,
    InvalidPriceError,
    MarketError,
    NotForSaleError,
    NotOwnerError,
    PaymentFailedError,
    UnknownAssetError,
)
from mintmarket.core.market_ledger import MarketLedger

__all__ = [
    "MarketLedger",
    "MarketError",
    "UnknownAssetError",
    "NotOwnerError",
    "InvalidPriceError",
    "NotForSaleError",
    "IncorrectPaymentError",
    "PaymentFailedError",
    "__version__",
]
