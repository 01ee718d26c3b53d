"""
POSBILL Billing Engine: Event Types and Payload Builders
==========================================================
Billing announces every commit attempt after the fact. Payloads are
plain JSON-ready dicts; subscribers never receive live engine objects.
"""

from __future__ import annotations

from posbill.core.commands.rejection import RejectionReason
from posbill.engines.cart.services import Cart
from posbill.engines.ledger.models import Bill


# ══════════════════════════════════════════════════════════════
# EVENT TYPE CONSTANTS
# ══════════════════════════════════════════════════════════════

BILLING_BILL_COMMITTED_V1 = "billing.bill.committed.v1"
BILLING_BILL_REJECTED_V1 = "billing.bill.rejected.v1"

BILLING_EVENT_TYPES = (
    BILLING_BILL_COMMITTED_V1,
    BILLING_BILL_REJECTED_V1,
)


# ══════════════════════════════════════════════════════════════
# PAYLOAD BUILDERS
# ══════════════════════════════════════════════════════════════

def build_bill_committed_payload(bill: Bill) -> dict:
    payload = bill.to_dict()
    payload["stock_movements"] = [
        {"product_id": item.product_id, "quantity": item.quantity}
        for item in bill.items
    ]
    return payload


def build_bill_rejected_payload(reason: RejectionReason, cart: Cart) -> dict:
    return {
        "reason": reason.to_dict(),
        "line_count": len(cart.items),
        "unit_count": cart.item_count(),
        "customer_name": cart.customer_name,
    }
