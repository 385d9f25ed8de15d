"""Caller-visible market failures.

Every rejected precondition raises a distinct ``MarketError`` subclass with
a stable ``code`` so callers can branch on cause.  All of them are raised
before any state is committed.
"""

from __future__ import annotations


class MarketError(RuntimeError):
    """Base class for every market failure."""

    code: str = "MarketError"
    default_message: str = "Market operation rejected"

    def __init__(self, message: str | None = None, **context: object) -> None:
        self.context = context
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class UnknownAssetError(MarketError):
    """The referenced asset id was never minted."""

    code = "UnknownAsset"
    default_message = "Unknown asset"


class NotOwnerError(MarketError):
    """The caller is not the asset's current owner."""

    code = "NotOwner"
    default_message = "You do not own this NFT"


class InvalidPriceError(MarketError):
    """A listing price was not a positive amount."""

    code = "InvalidPrice"
    default_message = "Price must be greater than zero"


class NotForSaleError(MarketError):
    """No active listing: never listed, or already sold."""

    code = "NotForSale"
    default_message = "NFT is not for sale"


class IncorrectPaymentError(MarketError):
    """The payment did not equal the listing price exactly."""

    code = "IncorrectPayment"
    default_message = "Incorrect value sent"


class PaymentFailedError(MarketError):
    """The payment channel could not move the funds."""

    code = "PaymentFailed"
    default_message = "Payment transfer failed"
