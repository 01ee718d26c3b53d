"""
POSBILL Ledger Engine: Bill
=============================
A committed bill. Immutable once created.

RULES (NON-NEGOTIABLE):
- total == subtotal + tax_amount - discount_amount, exactly
- items is a frozen tuple of the cart's lines at commit time
- a bill always has at least one line and a named customer
- amounts are stored unrounded; to_display_dict() rounds for humans
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Tuple

from posbill.core.primitives.money import format_amount, to_decimal
from posbill.core.primitives.payment import PaymentMethod
from posbill.engines.cart.models import LineItem

_AMOUNT_FIELDS = (
    "subtotal",
    "tax_amount",
    "discount_amount",
    "total",
    "discount_percent",
    "tax_rate",
)


@dataclass(frozen=True)
class Bill:
    """
    Fields:
        bill_id:          Opaque unique id (uuid hex)
        bill_number:      Human-readable number, e.g. BILL-000042
        items:            Line items as they stood at commit
        subtotal:         Sum of unit_price * quantity
        tax_amount:       subtotal * tax_rate
        discount_amount:  subtotal * discount_percent / 100
        total:            subtotal + tax_amount - discount_amount
        discount_percent: Discount applied (0..100)
        tax_rate:         Rate in force at commit (0.18 = 18%)
        issued_at:        Commit time, timezone-aware
        customer_name:    Required, non-blank
        customer_phone:   Optional
        payment_method:   Tender type recorded on the bill
    """
    bill_id: str
    bill_number: str
    items: Tuple[LineItem, ...]
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total: Decimal
    discount_percent: Decimal
    tax_rate: Decimal
    issued_at: datetime
    customer_name: str
    customer_phone: str = ""
    payment_method: PaymentMethod = PaymentMethod.CASH

    def __post_init__(self):
        if not self.bill_id or not isinstance(self.bill_id, str):
            raise ValueError("bill_id must be non-empty string.")
        if not self.bill_number or not isinstance(self.bill_number, str):
            raise ValueError("bill_number must be non-empty string.")
        if not isinstance(self.items, tuple) or not self.items:
            raise ValueError("items must be a non-empty tuple of LineItem.")
        if not all(isinstance(item, LineItem) for item in self.items):
            raise TypeError("items must contain only LineItem.")
        for name in _AMOUNT_FIELDS:
            object.__setattr__(self, name, to_decimal(getattr(self, name)))
        if self.total != self.subtotal + self.tax_amount - self.discount_amount:
            raise ValueError(
                "total must equal subtotal + tax_amount - discount_amount."
            )
        if not isinstance(self.issued_at, datetime) or self.issued_at.tzinfo is None:
            raise ValueError("issued_at must be a timezone-aware datetime.")
        if not isinstance(self.customer_name, str) or not self.customer_name.strip():
            raise ValueError("customer_name must be non-blank.")
        object.__setattr__(
            self, "payment_method", PaymentMethod.parse(self.payment_method),
        )

    @property
    def line_count(self) -> int:
        return len(self.items)

    @property
    def unit_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> dict:
        return {
            "bill_id": self.bill_id,
            "bill_number": self.bill_number,
            "items": [item.to_dict() for item in self.items],
            "subtotal": str(self.subtotal),
            "tax_amount": str(self.tax_amount),
            "discount_amount": str(self.discount_amount),
            "total": str(self.total),
            "discount_percent": str(self.discount_percent),
            "tax_rate": str(self.tax_rate),
            "issued_at": self.issued_at.isoformat(),
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "payment_method": self.payment_method.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Bill:
        return cls(
            bill_id=data["bill_id"],
            bill_number=data["bill_number"],
            items=tuple(LineItem.from_dict(entry) for entry in data["items"]),
            subtotal=to_decimal(data["subtotal"]),
            tax_amount=to_decimal(data["tax_amount"]),
            discount_amount=to_decimal(data["discount_amount"]),
            total=to_decimal(data["total"]),
            discount_percent=to_decimal(data.get("discount_percent", "0")),
            tax_rate=to_decimal(data["tax_rate"]),
            issued_at=datetime.fromisoformat(data["issued_at"]),
            customer_name=data["customer_name"],
            customer_phone=data.get("customer_phone", ""),
            payment_method=PaymentMethod.parse(data["payment_method"]),
        )

    def to_display_dict(self, places: int = 2) -> dict:
        """Rounded, human-facing view (bill history, receipts)."""
        return {
            "bill_number": self.bill_number,
            "issued_at": self.issued_at.isoformat(),
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "payment_method": self.payment_method.value,
            "items": [
                {
                    "name": item.name,
                    "quantity": item.quantity,
                    "unit_price": format_amount(item.unit_price, places),
                    "line_total": format_amount(item.line_total, places),
                }
                for item in self.items
            ],
            "subtotal": format_amount(self.subtotal, places),
            "tax_amount": format_amount(self.tax_amount, places),
            "discount_amount": format_amount(self.discount_amount, places),
            "total": format_amount(self.total, places),
        }
