"""
POSBILL Core Primitives
=========================
Engine-agnostic building blocks shared by catalog, cart and billing.

- Pure Python
- Immutable values
- Deterministic (same input → same output)

Primitives:
    money    : Decimal coercion and presentation rounding
    payment  : PaymentMethod enum
"""

from posbill.core.primitives.money import (
    HUNDRED,
    ZERO,
    format_amount,
    quantize_minor,
    to_decimal,
)
from posbill.core.primitives.payment import DEFAULT_PAYMENT_METHOD, PaymentMethod

__all__ = [
    "ZERO",
    "HUNDRED",
    "to_decimal",
    "quantize_minor",
    "format_amount",
    "PaymentMethod",
    "DEFAULT_PAYMENT_METHOD",
]
