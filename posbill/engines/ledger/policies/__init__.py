"""
POSBILL Ledger Engine: Policies
=================================
Checked before a bill commit moves any stock, so a bill the ledger
would refuse is rejected while nothing has changed yet.
"""

from __future__ import annotations

from typing import Optional

from posbill.core.commands.rejection import ReasonCode, RejectionReason
from posbill.engines.ledger.models import Bill
from posbill.engines.ledger.services import BillLedger


def bill_not_recorded_policy(
    bill: Bill,
    ledger: BillLedger,
) -> Optional[RejectionReason]:
    """Bill ids and bill numbers are unique within a ledger."""
    if ledger.get(bill.bill_id) is not None:
        duplicate = f"id '{bill.bill_id}'"
    elif ledger.find_by_number(bill.bill_number) is not None:
        duplicate = f"number '{bill.bill_number}'"
    else:
        return None
    return RejectionReason(
        code=ReasonCode.DUPLICATE_BILL,
        message=f"A bill with {duplicate} is already recorded.",
        policy_name="bill_not_recorded_policy",
    )
