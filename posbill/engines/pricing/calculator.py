"""
POSBILL Pricing Engine: Bill Totals
=====================================
Pure arithmetic, no state.

    tax_amount      = subtotal * tax_rate
    discount_amount = subtotal * discount_percent / 100
    total           = subtotal + tax_amount - discount_amount

Tax and discount are both taken on the pre-tax subtotal. Nothing is
rounded here; Decimal keeps total == subtotal + tax - discount exact.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from posbill.core.primitives.money import (
    HUNDRED,
    ZERO,
    AmountLike,
    format_amount,
    to_decimal,
)


@dataclass(frozen=True)
class PricingBreakdown:
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total: Decimal

    def __post_init__(self):
        if self.total != self.subtotal + self.tax_amount - self.discount_amount:
            raise ValueError(
                "total must equal subtotal + tax_amount - discount_amount."
            )

    def to_dict(self) -> dict:
        return {
            "subtotal": str(self.subtotal),
            "tax_amount": str(self.tax_amount),
            "discount_amount": str(self.discount_amount),
            "total": str(self.total),
        }

    def to_display_dict(self, places: int = 2) -> dict:
        return {
            "subtotal": format_amount(self.subtotal, places),
            "tax_amount": format_amount(self.tax_amount, places),
            "discount_amount": format_amount(self.discount_amount, places),
            "total": format_amount(self.total, places),
        }


def clamp_discount_percent(value: AmountLike) -> Decimal:
    """Pin an operator-entered discount into 0..100."""
    percent = to_decimal(value)
    if percent < ZERO:
        return ZERO
    if percent > HUNDRED:
        return HUNDRED
    return percent


def compute_totals(
    subtotal: AmountLike,
    tax_rate: AmountLike,
    discount_percent: AmountLike = ZERO,
) -> PricingBreakdown:
    """
    Raises ValueError for a negative subtotal, a tax rate outside 0..1
    or a discount outside 0..100 (callers clamp discounts first).
    """
    subtotal = to_decimal(subtotal)
    tax_rate = to_decimal(tax_rate)
    discount_percent = to_decimal(discount_percent)

    if subtotal < ZERO:
        raise ValueError(f"subtotal cannot be negative, got {subtotal}.")
    if not ZERO <= tax_rate <= 1:
        raise ValueError(f"Tax rate must be between 0 and 1, got {tax_rate}.")
    if not ZERO <= discount_percent <= HUNDRED:
        raise ValueError(
            f"discount_percent must be between 0 and 100, got {discount_percent}."
        )

    tax_amount = subtotal * tax_rate
    discount_amount = subtotal * discount_percent / HUNDRED

    return PricingBreakdown(
        subtotal=subtotal,
        tax_amount=tax_amount,
        discount_amount=discount_amount,
        total=subtotal + tax_amount - discount_amount,
    )
