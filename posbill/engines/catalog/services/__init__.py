"""
POSBILL Catalog Engine: Catalog Service
=========================================
Product registry and stock counters for one counter terminal.

Stock only moves through decrement_stock / decrement_batch (bill commit)
and restock. Every read-then-write runs under the catalog lock, so a
decrement can never observe a stale stock figure.
"""

from __future__ import annotations

import logging
from collections import Counter
from threading import Lock
from typing import Dict, Iterable, List, Optional, Tuple

from posbill.core.commands.outcomes import Outcome
from posbill.engines.catalog.models import (
    ALL_CATEGORIES,
    Product,
    ProductId,
)
from posbill.engines.catalog.policies import (
    product_must_exist_policy,
    sufficient_stock_policy,
)

logger = logging.getLogger("posbill.catalog")

StockDecrement = Tuple[ProductId, int]


def _validate_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValueError("amount must be positive integer.")


class Catalog:
    """In-memory catalog keyed by product_id, in registration order."""

    def __init__(self, products: Iterable[Product] = ()):
        self._products: Dict[ProductId, Product] = {}
        self._lock = Lock()
        for product in products:
            self.add_product(product)

    # ── Registration ──────────────────────────────────────────

    def add_product(self, product: Product) -> None:
        if not isinstance(product, Product):
            raise TypeError("product must be Product.")
        with self._lock:
            if product.product_id in self._products:
                raise ValueError(
                    f"Product '{product.product_id}' already registered."
                )
            self._products[product.product_id] = product
        logger.info(
            f"Product registered: {product.product_id} '{product.name}' "
            f"(stock: {product.stock}, category: {product.category})"
        )

    # ── Queries ───────────────────────────────────────────────

    def find_by_id(self, product_id: ProductId) -> Optional[Product]:
        return self._products.get(product_id)

    def available_stock(self, product_id: ProductId) -> int:
        """0 for unknown ids, never an error."""
        product = self._products.get(product_id)
        return product.stock if product is not None else 0

    def all(self) -> Tuple[Product, ...]:
        return tuple(self._products.values())

    def count(self) -> int:
        return len(self._products)

    def search(
        self,
        term: str = "",
        category: str = ALL_CATEGORIES,
    ) -> Tuple[Product, ...]:
        """Case-insensitive name match, optionally narrowed to one category."""
        needle = (term or "").strip().lower()
        return tuple(
            product for product in self._products.values()
            if needle in product.name.lower()
            and (category == ALL_CATEGORIES or product.category == category)
        )

    def categories(self) -> Tuple[str, ...]:
        """The "All" filter first, then distinct categories in first-seen order."""
        seen: List[str] = []
        for product in self._products.values():
            if product.category not in seen:
                seen.append(product.category)
        return (ALL_CATEGORIES, *seen)

    def __contains__(self, product_id) -> bool:
        return product_id in self._products

    def __len__(self) -> int:
        return len(self._products)

    # ── Stock movements ───────────────────────────────────────

    def decrement_stock(self, product_id: ProductId, amount: int) -> Outcome:
        """
        Remove `amount` units. Rejected with INSUFFICIENT_STOCK when the
        product holds fewer units (or is unknown); stock is then untouched.
        """
        _validate_amount(amount)
        with self._lock:
            rejection = sufficient_stock_policy(
                product_id, amount, self._products.get,
            )
            if rejection is not None:
                logger.debug(f"Stock decrement rejected: {rejection.message}")
                return Outcome.reject(rejection)

            updated = self._apply_delta(product_id, -amount)

        logger.info(
            f"Stock decremented: {product_id} by {amount} "
            f"(remaining: {updated.stock})"
        )
        return Outcome.accept(updated)

    def decrement_batch(self, decrements: Iterable[StockDecrement]) -> Outcome:
        """
        All-or-nothing decrement of several products.

        Amounts for the same product are summed, every total is checked
        against current stock, and only then is anything written. On
        rejection no product's stock has changed.
        """
        totals: Counter = Counter()
        for product_id, amount in decrements:
            _validate_amount(amount)
            totals[product_id] += amount

        with self._lock:
            for product_id, amount in totals.items():
                rejection = sufficient_stock_policy(
                    product_id, amount, self._products.get,
                )
                if rejection is not None:
                    logger.debug(
                        f"Batch stock decrement rejected: {rejection.message}"
                    )
                    return Outcome.reject(rejection)

            updated = tuple(
                self._apply_delta(product_id, -amount)
                for product_id, amount in totals.items()
            )

        logger.info(
            f"Batch stock decrement applied to {len(updated)} product(s)"
        )
        return Outcome.accept(updated)

    def restock(self, product_id: ProductId, amount: int) -> Outcome:
        """Positive stock adjustment (goods received, count correction)."""
        _validate_amount(amount)
        with self._lock:
            rejection = product_must_exist_policy(product_id, self._products.get)
            if rejection is not None:
                return Outcome.reject(rejection)
            updated = self._apply_delta(product_id, amount)

        logger.info(
            f"Stock received: {product_id} +{amount} (now: {updated.stock})"
        )
        return Outcome.accept(updated)

    def _apply_delta(self, product_id: ProductId, delta: int) -> Product:
        # Caller holds self._lock and has already validated the movement.
        updated = self._products[product_id].with_stock(
            self._products[product_id].stock + delta
        )
        self._products[product_id] = updated
        return updated

    # ── Snapshot ──────────────────────────────────────────────

    def to_dict(self) -> List[dict]:
        return [product.to_dict() for product in self._products.values()]

    @classmethod
    def from_dict(cls, data: Iterable[dict]) -> Catalog:
        return cls(Product.from_dict(entry) for entry in data)


__all__ = [
    "Catalog",
    "StockDecrement",
]
