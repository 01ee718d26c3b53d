"""
POSBILL Catalog Engine: Policies
==================================
Stock rules, each returning a RejectionReason or None.
"""

from __future__ import annotations

from typing import Callable, Optional

from posbill.core.commands.rejection import ReasonCode, RejectionReason
from posbill.engines.catalog.models import Product, ProductId

ProductLookup = Callable[[ProductId], Optional[Product]]


def product_must_exist_policy(
    product_id: ProductId,
    product_lookup: ProductLookup,
) -> Optional[RejectionReason]:
    if product_lookup(product_id) is None:
        return RejectionReason(
            code=ReasonCode.PRODUCT_NOT_FOUND,
            message=f"Product '{product_id}' not found.",
            policy_name="product_must_exist_policy",
        )
    return None


def sufficient_stock_policy(
    product_id: ProductId,
    amount: int,
    product_lookup: ProductLookup,
) -> Optional[RejectionReason]:
    """
    Reject a decrement that would drive stock below zero.
    An unknown product has no stock to decrement.
    """
    product = product_lookup(product_id)
    available = product.stock if product is not None else 0

    if amount > available:
        name = product.name if product is not None else str(product_id)
        return RejectionReason(
            code=ReasonCode.INSUFFICIENT_STOCK,
            message=(
                f"Insufficient stock for '{name}': "
                f"requested {amount}, available {available}."
            ),
            policy_name="sufficient_stock_policy",
        )

    return None
