"""
Starter catalog for a fresh terminal (demo data, prices in INR).
"""

from __future__ import annotations

from decimal import Decimal

from posbill.engines.catalog.models import Product
from posbill.engines.catalog.services import Catalog

DEFAULT_PRODUCTS = (
    Product(1, "Product A", Decimal("100"), 50, "Electronics"),
    Product(2, "Product B", Decimal("50"), 100, "Accessories"),
    Product(3, "Product C", Decimal("200"), 30, "Electronics"),
    Product(4, "Product D", Decimal("75"), 80, "Accessories"),
    Product(5, "Product E", Decimal("150"), 20, "Electronics"),
)


def default_catalog() -> Catalog:
    return Catalog(DEFAULT_PRODUCTS)
