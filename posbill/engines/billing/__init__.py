"""
POSBILL Billing Engine
========================
Bill commit transaction and the operator-facing service.
"""

from posbill.engines.billing.events import (
    BILLING_BILL_COMMITTED_V1,
    BILLING_BILL_REJECTED_V1,
    BILLING_EVENT_TYPES,
)
from posbill.engines.billing.services import (
    SNAPSHOT_KEYS,
    BillingService,
    CommitPhase,
)

__all__ = [
    "BILLING_BILL_COMMITTED_V1",
    "BILLING_BILL_REJECTED_V1",
    "BILLING_EVENT_TYPES",
    "BillingService",
    "CommitPhase",
    "SNAPSHOT_KEYS",
]
