"""
POSBILL Cart Engine: Line Item
================================
One product's row in the open bill.

name and unit_price are copied from the product when the row is
created, so later catalog changes never reprice an open cart. The
operator may still override unit_price on the row itself.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from decimal import Decimal

from posbill.core.primitives.money import to_decimal
from posbill.engines.catalog.models import Product, ProductId, validate_product_id


def new_line_id() -> str:
    return uuid.uuid4().hex


def validate_quantity(quantity) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise TypeError(
            f"quantity must be an integer, got {type(quantity).__name__}."
        )


@dataclass(frozen=True)
class LineItem:
    line_id: str
    product_id: ProductId
    name: str
    unit_price: Decimal
    quantity: int = 1

    def __post_init__(self):
        if not self.line_id or not isinstance(self.line_id, str):
            raise ValueError("line_id must be non-empty string.")
        validate_product_id(self.product_id)
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be non-empty string.")
        object.__setattr__(self, "unit_price", to_decimal(self.unit_price))
        if self.unit_price < 0:
            raise ValueError("unit_price cannot be negative.")
        validate_quantity(self.quantity)
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1.")

    @classmethod
    def from_product(cls, product: Product, line_id: str) -> LineItem:
        return cls(
            line_id=line_id,
            product_id=product.product_id,
            name=product.name,
            unit_price=product.unit_price,
            quantity=1,
        )

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def with_quantity(self, quantity: int) -> LineItem:
        return replace(self, quantity=quantity)

    def with_unit_price(self, unit_price: Decimal) -> LineItem:
        return replace(self, unit_price=unit_price)

    def to_dict(self) -> dict:
        return {
            "line_id": self.line_id,
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": str(self.unit_price),
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> LineItem:
        return cls(
            line_id=data["line_id"],
            product_id=data["product_id"],
            name=data["name"],
            unit_price=to_decimal(data["unit_price"]),
            quantity=data["quantity"],
        )
