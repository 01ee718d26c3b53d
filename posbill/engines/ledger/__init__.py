"""
POSBILL Ledger Engine
=======================
Committed bills, append-only, newest first.
"""

from posbill.engines.ledger.models import Bill
from posbill.engines.ledger.services import BillLedger

__all__ = ["Bill", "BillLedger"]
