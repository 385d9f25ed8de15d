"""Conversion between display amounts and integer base units.

All ledger arithmetic is on integers.  Display amounts ("1.5") are scaled
by ``10 ** decimals``; with the default 18 decimals one unit is 10**18 base
units, like ether and wei.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, localcontext

DEFAULT_DECIMALS = 18


def parse_amount(value: str | int | Decimal, decimals: int = DEFAULT_DECIMALS) -> int:
    """Convert a display amount to base units.

    Raises
    ------
    ValueError
        If *value* is not a number, is negative, is too large to
        represent, or carries more precision than *decimals* allows.

    Examples
    --------
    >>> parse_amount("1")
    1000000000000000000
    >>> parse_amount("0.5", decimals=2)
    50
    """
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Not a valid amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Not a valid amount: {value!r}")
    if amount < 0:
        raise ValueError(f"Amount must not be negative: {value!r}")

    with localcontext() as ctx:
        ctx.prec = 96
        try:
            scaled = amount.scaleb(decimals)
        except ArithmeticError as exc:
            raise ValueError(f"Amount out of range: {value!r}") from exc
    if scaled != scaled.to_integral_value():
        raise ValueError(
            f"Amount {value!r} is finer than {decimals} decimal places."
        )
    return int(scaled)


def format_amount(base_units: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """Render base units as a display amount without trailing zeros.

    >>> format_amount(1500000000000000000)
    '1.5'
    """
    sign = "-" if base_units < 0 else ""
    whole, frac = divmod(abs(base_units), 10**decimals)
    if decimals == 0 or frac == 0:
        return f"{sign}{whole}"
    frac_str = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{sign}{whole}.{frac_str}"
