"""
POSBILL Cart Engine: Cart Service
===================================
The open bill: ordered line items plus discount, customer and payment
fields.

Rules:
- At most one line per product (adding again bumps the quantity)
- A line's quantity never exceeds its product's current stock
- Rejected mutations leave every field unchanged
- Stock is never touched here; only a bill commit decrements it

The cart reads stock through `product_lookup`, a plain callable
(usually Catalog.find_by_id), so it does not own or mutate the catalog.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from posbill.core.commands.outcomes import Outcome
from posbill.core.config.settings import EngineSettings
from posbill.core.primitives.money import ZERO, AmountLike, to_decimal
from posbill.core.primitives.payment import PaymentMethod
from posbill.engines.cart.models import LineItem, new_line_id, validate_quantity
from posbill.engines.cart.policies import (
    line_item_must_exist_policy,
    payment_method_valid_policy,
    price_not_negative_policy,
    product_in_stock_policy,
    quantity_within_stock_policy,
)
from posbill.engines.catalog.models import Product, ProductId
from posbill.engines.catalog.policies import (
    ProductLookup,
    product_must_exist_policy,
)
from posbill.engines.pricing import (
    PricingBreakdown,
    clamp_discount_percent,
    compute_totals,
)

logger = logging.getLogger("posbill.cart")


class Cart:
    """In-progress bill for the current customer."""

    def __init__(
        self,
        *,
        product_lookup: ProductLookup,
        settings: Optional[EngineSettings] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._product_lookup = product_lookup
        self._settings = settings or EngineSettings()
        self._id_factory = id_factory or new_line_id
        self._items: List[LineItem] = []
        self._discount_percent: Decimal = ZERO
        self._customer_name: str = ""
        self._customer_phone: str = ""
        self._payment_method: PaymentMethod = self._settings.default_payment_method

    # ── Read model ────────────────────────────────────────────

    @property
    def items(self) -> Tuple[LineItem, ...]:
        return tuple(self._items)

    @property
    def discount_percent(self) -> Decimal:
        return self._discount_percent

    @property
    def customer_name(self) -> str:
        return self._customer_name

    @property
    def customer_phone(self) -> str:
        return self._customer_phone

    @property
    def payment_method(self) -> PaymentMethod:
        return self._payment_method

    def is_empty(self) -> bool:
        return not self._items

    def item_count(self) -> int:
        """Total units across all lines."""
        return sum(item.quantity for item in self._items)

    def get_item(self, line_id: str) -> Optional[LineItem]:
        for item in self._items:
            if item.line_id == line_id:
                return item
        return None

    def find_by_product(self, product_id: ProductId) -> Optional[LineItem]:
        for item in self._items:
            if item.product_id == product_id:
                return item
        return None

    def subtotal(self) -> Decimal:
        """Recomputed from the current lines on every call."""
        return sum((item.line_total for item in self._items), ZERO)

    def totals(self, tax_rate: Optional[AmountLike] = None) -> PricingBreakdown:
        rate = self._settings.tax_rate if tax_rate is None else tax_rate
        return compute_totals(self.subtotal(), rate, self._discount_percent)

    # ── Line mutations ────────────────────────────────────────

    def add_product(self, product: Product) -> Outcome:
        """
        Add one unit of `product`.

        OUT_OF_STOCK when the product has no stock. For a product already
        in the cart the line grows by one, or STOCK_EXCEEDED if that would
        pass the product's stock. Accepted outcome carries the line.
        """
        rejection = product_in_stock_policy(product)
        if rejection is not None:
            return self._rejected(rejection)

        existing = self.find_by_product(product.product_id)
        if existing is not None:
            quantity = existing.quantity + 1
            rejection = quantity_within_stock_policy(
                existing.name, quantity, product.stock,
            )
            if rejection is not None:
                return self._rejected(rejection)
            updated = existing.with_quantity(quantity)
            self._replace(updated)
            logger.info(
                f"Cart line {updated.line_id} '{updated.name}' "
                f"quantity → {quantity}"
            )
            return Outcome.accept(updated)

        item = LineItem.from_product(product, self._id_factory())
        self._items.append(item)
        logger.info(f"Cart line added: {item.line_id} '{item.name}'")
        return Outcome.accept(item)

    def set_quantity(self, line_id: str, quantity: int) -> Outcome:
        """
        Replace a line's quantity. Below 1 removes the line (a no-op
        for an unknown line_id).

        The ceiling is the product's current stock. If the product can no
        longer be resolved, settings.fallback_stock_ceiling applies, or
        PRODUCT_NOT_FOUND when that setting is None.
        """
        validate_quantity(quantity)
        if quantity < 1:
            self.remove_item(line_id)
            return Outcome.accept()

        item = self.get_item(line_id)
        rejection = line_item_must_exist_policy(line_id, item)
        if rejection is not None:
            return self._rejected(rejection)

        product = self._product_lookup(item.product_id)
        if product is not None:
            ceiling = product.stock
        elif self._settings.fallback_stock_ceiling is not None:
            ceiling = self._settings.fallback_stock_ceiling
            logger.warning(
                f"Product {item.product_id} for cart line {line_id} not in "
                f"catalog; using fallback ceiling {ceiling}"
            )
        else:
            return self._rejected(
                product_must_exist_policy(item.product_id, self._product_lookup)
            )

        rejection = quantity_within_stock_policy(item.name, quantity, ceiling)
        if rejection is not None:
            return self._rejected(rejection)

        updated = item.with_quantity(quantity)
        self._replace(updated)
        logger.info(f"Cart line {line_id} '{item.name}' quantity → {quantity}")
        return Outcome.accept(updated)

    def set_price(self, line_id: str, price: AmountLike) -> Outcome:
        """Manual price override on one line; the catalog price is untouched."""
        price = to_decimal(price)
        item = self.get_item(line_id)
        rejection = (
            line_item_must_exist_policy(line_id, item)
            or price_not_negative_policy(price)
        )
        if rejection is not None:
            return self._rejected(rejection)

        updated = item.with_unit_price(price)
        self._replace(updated)
        logger.info(
            f"Cart line {line_id} '{item.name}' price "
            f"{item.unit_price} → {price}"
        )
        return Outcome.accept(updated)

    def remove_item(self, line_id: str) -> None:
        """No-op when the line is not in the cart."""
        before = len(self._items)
        self._items = [item for item in self._items if item.line_id != line_id]
        if len(self._items) != before:
            logger.info(f"Cart line removed: {line_id}")

    def clear(self) -> None:
        self._items = []
        self._discount_percent = ZERO
        logger.info("Cart cleared")

    def reset(self) -> None:
        """Return to a fresh cart after a committed bill."""
        self.clear()
        self._payment_method = self._settings.default_payment_method
        if self._settings.reset_customer_on_commit:
            self._customer_name = ""
            self._customer_phone = ""

    # ── Bill-level fields ─────────────────────────────────────

    def set_discount(self, percent: AmountLike) -> Decimal:
        """Store the discount clamped into 0..100 and return it."""
        self._discount_percent = clamp_discount_percent(percent)
        return self._discount_percent

    def set_customer(self, name: str, phone: str = "") -> None:
        self._customer_name = name or ""
        self._customer_phone = phone or ""

    def set_payment_method(self, method) -> Outcome:
        rejection = payment_method_valid_policy(method)
        if rejection is not None:
            return self._rejected(rejection)
        self._payment_method = PaymentMethod.parse(method)
        return Outcome.accept(self._payment_method)

    # ── Snapshot ──────────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self._items],
            "discount_percent": str(self._discount_percent),
            "customer_name": self._customer_name,
            "customer_phone": self._customer_phone,
            "payment_method": self._payment_method.value,
        }

    def load(self, data: dict) -> None:
        """
        Replace the whole cart with a snapshot from to_dict().
        Raises ValueError on a malformed snapshot; the cart is then unchanged.
        """
        items = [LineItem.from_dict(entry) for entry in data.get("items", [])]
        product_ids = [item.product_id for item in items]
        if len(set(product_ids)) != len(product_ids):
            raise ValueError("Cart snapshot holds duplicate product lines.")
        line_ids = [item.line_id for item in items]
        if len(set(line_ids)) != len(line_ids):
            raise ValueError("Cart snapshot holds duplicate line ids.")
        discount = clamp_discount_percent(data.get("discount_percent", ZERO))
        method = PaymentMethod.parse(
            data.get("payment_method", self._settings.default_payment_method)
        )

        self._items = items
        self._discount_percent = discount
        self._customer_name = data.get("customer_name", "") or ""
        self._customer_phone = data.get("customer_phone", "") or ""
        self._payment_method = method

    # ── Internals ─────────────────────────────────────────────

    def _replace(self, updated: LineItem) -> None:
        self._items = [
            updated if item.line_id == updated.line_id else item
            for item in self._items
        ]

    @staticmethod
    def _rejected(rejection) -> Outcome:
        logger.debug(f"Cart mutation rejected: {rejection.code} {rejection.message}")
        return Outcome.reject(rejection)


__all__ = ["Cart"]
