"""
POSBILL Billing Engine: Policies
==================================
Preconditions checked before a bill commit touches anything.
"""

from __future__ import annotations

from typing import Optional

from posbill.core.commands.rejection import ReasonCode, RejectionReason
from posbill.engines.cart.services import Cart


def bill_not_empty_policy(cart: Cart) -> Optional[RejectionReason]:
    if cart.is_empty():
        return RejectionReason(
            code=ReasonCode.EMPTY_BILL,
            message="Please add items to the bill.",
            policy_name="bill_not_empty_policy",
        )
    return None


def customer_required_policy(cart: Cart) -> Optional[RejectionReason]:
    """Whitespace-only names count as missing."""
    if not cart.customer_name.strip():
        return RejectionReason(
            code=ReasonCode.MISSING_CUSTOMER,
            message="Please enter customer name.",
            policy_name="customer_required_policy",
        )
    return None


COMMIT_PRECONDITIONS = (
    bill_not_empty_policy,
    customer_required_policy,
)


def evaluate_commit_preconditions(cart: Cart) -> Optional[RejectionReason]:
    """First failing precondition in declaration order, or None."""
    for policy in COMMIT_PRECONDITIONS:
        rejection = policy(cart)
        if rejection is not None:
            return rejection
    return None
