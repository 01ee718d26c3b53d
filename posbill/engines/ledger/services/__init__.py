"""
POSBILL Ledger Engine: Bill Ledger
====================================
Append-only history of committed bills, read newest-first.

There is no update or delete. Bill numbers come from a monotonic
sequence owned by the ledger and are unique within it.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from posbill.core.primitives.money import ZERO, format_amount
from posbill.engines.ledger.models import Bill

logger = logging.getLogger("posbill.ledger")


class BillLedger:

    def __init__(self, bills: Iterable[Bill] = ()):
        """`bills` is newest-first, the same order all() returns."""
        # Stored oldest-first so append stays O(1).
        self._bills: List[Bill] = []
        self._by_id: Dict[str, Bill] = {}
        self._by_number: Dict[str, Bill] = {}
        self._sequence = 0
        for bill in reversed(list(bills)):
            self.append(bill)

    def append(self, bill: Bill) -> None:
        """Raises ValueError if the bill id or number is already recorded."""
        if not isinstance(bill, Bill):
            raise TypeError("bill must be Bill.")
        if bill.bill_id in self._by_id:
            raise ValueError(f"Bill id '{bill.bill_id}' already in ledger.")
        if bill.bill_number in self._by_number:
            raise ValueError(
                f"Bill number '{bill.bill_number}' already in ledger."
            )

        self._bills.append(bill)
        self._by_id[bill.bill_id] = bill
        self._by_number[bill.bill_number] = bill
        self._sequence += 1

        logger.info(
            f"Bill recorded: {bill.bill_number} "
            f"(total: {format_amount(bill.total)}, ledger size: {len(self._bills)})"
        )

    def next_bill_number(self, prefix: str = "BILL") -> str:
        sequence = self._sequence + 1
        candidate = f"{prefix}-{sequence:06d}"
        while candidate in self._by_number:
            sequence += 1
            candidate = f"{prefix}-{sequence:06d}"
        return candidate

    def all(self) -> Tuple[Bill, ...]:
        return tuple(reversed(self._bills))

    def count(self) -> int:
        return len(self._bills)

    def latest(self) -> Optional[Bill]:
        return self._bills[-1] if self._bills else None

    def get(self, bill_id: str) -> Optional[Bill]:
        return self._by_id.get(bill_id)

    def find_by_number(self, bill_number: str) -> Optional[Bill]:
        return self._by_number.get(bill_number)

    def total_revenue(self) -> Decimal:
        return sum((bill.total for bill in self._bills), ZERO)

    def __len__(self) -> int:
        return len(self._bills)

    def to_dict(self) -> List[dict]:
        return [bill.to_dict() for bill in self.all()]

    @classmethod
    def from_dict(cls, data: Iterable[dict]) -> BillLedger:
        return cls(Bill.from_dict(entry) for entry in data)


__all__ = ["BillLedger"]
