"""
POSBILL Catalog Engine: Product Model
=======================================
A Product is an immutable snapshot. When stock changes, the catalog
stores a new snapshot; callers holding an old one are unaffected.

RULES:
- unit_price is Decimal and never negative
- stock is an integer and never negative
- category is an open-ended string; "All" is reserved as a query filter
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Union

from posbill.core.primitives.money import to_decimal

ProductId = Union[int, str]

ALL_CATEGORIES = "All"


def validate_product_id(product_id) -> None:
    if isinstance(product_id, bool) or not isinstance(product_id, (int, str)):
        raise ValueError("product_id must be int or str.")
    if isinstance(product_id, str) and not product_id.strip():
        raise ValueError("product_id must be non-empty.")


@dataclass(frozen=True)
class Product:
    product_id: ProductId
    name: str
    unit_price: Decimal
    stock: int
    category: str

    def __post_init__(self):
        validate_product_id(self.product_id)
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be non-empty string.")
        object.__setattr__(self, "unit_price", to_decimal(self.unit_price))
        if self.unit_price < 0:
            raise ValueError("unit_price cannot be negative.")
        if isinstance(self.stock, bool) or not isinstance(self.stock, int):
            raise ValueError("stock must be an integer.")
        if self.stock < 0:
            raise ValueError("stock cannot be negative.")
        if not self.category or not isinstance(self.category, str):
            raise ValueError("category must be non-empty string.")
        if self.category == ALL_CATEGORIES:
            raise ValueError(
                f"'{ALL_CATEGORIES}' is a query filter, not a category."
            )

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    def with_stock(self, stock: int) -> Product:
        return replace(self, stock=stock)

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": str(self.unit_price),
            "stock": self.stock,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Product:
        return cls(
            product_id=data["product_id"],
            name=data["name"],
            unit_price=to_decimal(data["unit_price"]),
            stock=data["stock"],
            category=data["category"],
        )
