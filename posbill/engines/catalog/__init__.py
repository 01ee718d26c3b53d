"""
POSBILL Catalog Engine
========================
Products, stock counters, availability queries, stock decrements.
"""

from posbill.engines.catalog.models import ALL_CATEGORIES, Product, ProductId
from posbill.engines.catalog.services import Catalog, StockDecrement
from posbill.engines.catalog.seed import DEFAULT_PRODUCTS, default_catalog

__all__ = [
    "ALL_CATEGORIES",
    "Catalog",
    "DEFAULT_PRODUCTS",
    "Product",
    "ProductId",
    "StockDecrement",
    "default_catalog",
]
