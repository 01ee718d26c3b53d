"""
POSBILL Money Primitive: Decimal Amounts
==========================================
Single-currency engine. All amounts are decimal.Decimal.

RULES:
- No floats inside stored amounts (floats are converted through str()).
- No rounding inside calculations or stored totals.
- Rounding to minor units happens only in quantize_minor / format_amount,
  which are presentation helpers.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

AmountLike = Union[Decimal, int, str, float]

ZERO = Decimal("0")
HUNDRED = Decimal("100")
DEFAULT_MINOR_UNITS = 2


def to_decimal(value: AmountLike) -> Decimal:
    """
    Coerce a user-supplied amount into Decimal.

    Floats go through str() so 0.18 stays 0.18 instead of its binary
    expansion. Booleans and non-finite values are refused.
    """
    if isinstance(value, bool):
        raise TypeError("amount must be numeric, got bool.")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value)
        except InvalidOperation:
            raise ValueError(f"'{value}' is not a valid amount.") from None
    elif isinstance(value, float):
        result = Decimal(str(value))
    else:
        raise TypeError(
            f"amount must be Decimal, int, str or float, "
            f"got {type(value).__name__}."
        )
    if not result.is_finite():
        raise ValueError(f"amount must be finite, got {value!r}.")
    return result


def quantize_minor(amount: Decimal, places: int = DEFAULT_MINOR_UNITS) -> Decimal:
    """Round to currency precision (half-up). Presentation only."""
    exponent = Decimal(1).scaleb(-places)
    return amount.quantize(exponent, rounding=ROUND_HALF_UP)


def format_amount(amount: Decimal, places: int = DEFAULT_MINOR_UNITS) -> str:
    return f"{quantize_minor(amount, places):.{places}f}"
