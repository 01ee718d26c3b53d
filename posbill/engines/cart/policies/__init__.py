"""
POSBILL Cart Engine: Policies
===============================
Engine-specific validation policies for cart mutations.
Each returns a RejectionReason, or None when the mutation may proceed.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from posbill.core.commands.rejection import ReasonCode, RejectionReason
from posbill.core.primitives.payment import PaymentMethod
from posbill.engines.cart.models import LineItem
from posbill.engines.catalog.models import Product


def product_in_stock_policy(product: Product) -> Optional[RejectionReason]:
    """A product with no units left cannot be added at all."""
    if product.stock <= 0:
        return RejectionReason(
            code=ReasonCode.OUT_OF_STOCK,
            message=f"'{product.name}' is out of stock.",
            policy_name="product_in_stock_policy",
        )
    return None


def quantity_within_stock_policy(
    item_name: str,
    quantity: int,
    ceiling: int,
) -> Optional[RejectionReason]:
    """A line may never ask for more units than the product holds."""
    if quantity > ceiling:
        return RejectionReason(
            code=ReasonCode.STOCK_EXCEEDED,
            message=(
                f"Cannot set '{item_name}' to {quantity}: "
                f"only {ceiling} in stock."
            ),
            policy_name="quantity_within_stock_policy",
        )
    return None


def price_not_negative_policy(price: Decimal) -> Optional[RejectionReason]:
    if price < 0:
        return RejectionReason(
            code=ReasonCode.INVALID_PRICE,
            message=f"Price cannot be negative (got {price}).",
            policy_name="price_not_negative_policy",
        )
    return None


def line_item_must_exist_policy(
    line_id: str,
    item: Optional[LineItem],
) -> Optional[RejectionReason]:
    if item is None:
        return RejectionReason(
            code=ReasonCode.LINE_ITEM_NOT_FOUND,
            message=f"Line item '{line_id}' is not in the cart.",
            policy_name="line_item_must_exist_policy",
        )
    return None


def payment_method_valid_policy(value) -> Optional[RejectionReason]:
    try:
        PaymentMethod.parse(value)
    except ValueError:
        accepted = ", ".join(method.value for method in PaymentMethod)
        return RejectionReason(
            code=ReasonCode.INVALID_PAYMENT_METHOD,
            message=f"'{value}' is not a payment method ({accepted}).",
            policy_name="payment_method_valid_policy",
        )
    return None
