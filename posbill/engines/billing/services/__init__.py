"""
POSBILL Billing Engine: Application Service
=============================================
Operator-facing facade over Catalog, Cart and BillLedger, and owner of
the bill commit transaction.

generate_bill():

    IDLE → VALIDATING → COMMITTING → IDLE

1. Validate: cart not empty, customer named. Nothing mutated yet.
2. Price the cart (subtotal, tax, discount, total).
3. Build the immutable Bill and check the ledger will take it.
4. Decrement stock for every line as one all-or-nothing batch.
5. Append the bill to the ledger (stock is restored if that fails),
   reset the cart.

The whole sequence runs under one re-entrant lock shared with the
cart-mutating methods, so no caller can observe a half-committed bill.
Events are dispatched after the lock is released.
"""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from enum import Enum
from threading import RLock
from typing import Callable, Optional, Tuple

from posbill.core.commands.outcomes import Outcome
from posbill.core.commands.rejection import RejectionReason
from posbill.core.config.settings import EngineSettings
from posbill.core.events import EngineEvent, SubscriberRegistry, dispatch
from posbill.core.primitives.money import AmountLike, format_amount
from posbill.core.time.clock import Clock, SystemClock
from posbill.engines.billing.events import (
    BILLING_BILL_COMMITTED_V1,
    BILLING_BILL_REJECTED_V1,
    build_bill_committed_payload,
    build_bill_rejected_payload,
)
from posbill.engines.billing.policies import evaluate_commit_preconditions
from posbill.engines.cart.services import Cart
from posbill.engines.catalog.models import ProductId
from posbill.engines.catalog.policies import product_must_exist_policy
from posbill.engines.catalog.services import Catalog
from posbill.engines.ledger.models import Bill
from posbill.engines.ledger.policies import bill_not_recorded_policy
from posbill.engines.ledger.services import BillLedger
from posbill.engines.pricing import PricingBreakdown

logger = logging.getLogger("posbill.billing")

SNAPSHOT_KEYS = ("catalog", "cart", "ledger")


class CommitPhase(Enum):
    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    COMMITTING = "COMMITTING"


def _new_bill_id() -> str:
    return uuid.uuid4().hex


class BillingService:
    """Billing engine for a single counter terminal."""

    def __init__(
        self,
        *,
        catalog: Optional[Catalog] = None,
        ledger: Optional[BillLedger] = None,
        cart: Optional[Cart] = None,
        settings: Optional[EngineSettings] = None,
        clock: Optional[Clock] = None,
        subscriber_registry: Optional[SubscriberRegistry] = None,
        bill_id_factory: Optional[Callable[[], str]] = None,
    ):
        self._settings = settings if settings is not None else EngineSettings()
        self._catalog = catalog if catalog is not None else Catalog()
        self._ledger = ledger if ledger is not None else BillLedger()
        self._cart = cart if cart is not None else Cart(
            product_lookup=self._catalog.find_by_id,
            settings=self._settings,
        )
        self._clock = clock if clock is not None else SystemClock()
        self._subscribers = (
            subscriber_registry
            if subscriber_registry is not None
            else SubscriberRegistry()
        )
        self._bill_id_factory = bill_id_factory or _new_bill_id
        self._lock = RLock()
        self._phase = CommitPhase.IDLE

    # ── Components ────────────────────────────────────────────

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def cart(self) -> Cart:
        return self._cart

    @property
    def ledger(self) -> BillLedger:
        return self._ledger

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    @property
    def phase(self) -> CommitPhase:
        return self._phase

    @property
    def subscriber_registry(self) -> SubscriberRegistry:
        return self._subscribers

    def subscribe(
        self,
        event_type: str,
        handler: Callable[[EngineEvent], None],
        *,
        subscriber_engine: str,
    ) -> None:
        self._subscribers.register_subscriber(
            event_type, handler, subscriber_engine,
        )

    # ── Cart operations ───────────────────────────────────────

    def add_product(self, product_id: ProductId) -> Outcome:
        """Add one unit of a catalog product to the cart."""
        with self._lock:
            rejection = product_must_exist_policy(
                product_id, self._catalog.find_by_id,
            )
            if rejection is not None:
                return Outcome.reject(rejection)
            return self._cart.add_product(self._catalog.find_by_id(product_id))

    def set_quantity(self, line_id: str, quantity: int) -> Outcome:
        with self._lock:
            return self._cart.set_quantity(line_id, quantity)

    def set_price(self, line_id: str, price: AmountLike) -> Outcome:
        with self._lock:
            return self._cart.set_price(line_id, price)

    def remove_item(self, line_id: str) -> None:
        with self._lock:
            self._cart.remove_item(line_id)

    def clear_cart(self) -> None:
        with self._lock:
            self._cart.clear()

    def set_discount(self, percent: AmountLike) -> Decimal:
        with self._lock:
            return self._cart.set_discount(percent)

    def set_customer(self, name: str, phone: str = "") -> None:
        with self._lock:
            self._cart.set_customer(name, phone)

    def set_payment_method(self, method) -> Outcome:
        with self._lock:
            return self._cart.set_payment_method(method)

    def totals(self) -> PricingBreakdown:
        with self._lock:
            return self._cart.totals(self._settings.tax_rate)

    # ── Bill commit ───────────────────────────────────────────

    def generate_bill(self) -> Outcome:
        """
        Commit the cart as a Bill.

        Returns an accepted Outcome carrying the Bill, or a rejected one
        (EMPTY_BILL, MISSING_CUSTOMER, DUPLICATE_BILL, INSUFFICIENT_STOCK)
        after which catalog, cart and ledger are exactly as before the call.
        """
        with self._lock:
            try:
                self._phase = CommitPhase.VALIDATING
                rejection = evaluate_commit_preconditions(self._cart)
                if rejection is not None:
                    event = self._rejected_event(rejection)
                else:
                    breakdown = self._cart.totals(self._settings.tax_rate)
                    bill = self._build_bill(breakdown)
                    rejection = bill_not_recorded_policy(bill, self._ledger)
                    if rejection is None:
                        self._phase = CommitPhase.COMMITTING
                        rejection = self._record(bill)

                    if rejection is not None:
                        event = self._rejected_event(rejection)
                    else:
                        self._cart.reset()
                        event = self._event(
                            BILLING_BILL_COMMITTED_V1,
                            build_bill_committed_payload(bill),
                        )
            finally:
                self._phase = CommitPhase.IDLE

        dispatch(event, self._subscribers)

        if rejection is not None:
            logger.info(
                f"Bill commit REJECTED: {rejection.code} ({rejection.message})"
            )
            return Outcome.reject(rejection)

        logger.info(
            f"Bill {bill.bill_number} committed: {bill.line_count} line(s), "
            f"total {format_amount(bill.total, self._settings.currency_places)}, "
            f"{bill.payment_method.value}"
        )
        return Outcome.accept(bill)

    def _record(self, bill: Bill) -> Optional[RejectionReason]:
        """
        Take stock for every line, then append the bill. If the ledger
        still refuses the bill, the stock is put back before re-raising.
        """
        movements = [(item.product_id, item.quantity) for item in bill.items]
        stock = self._catalog.decrement_batch(movements)
        if stock.is_rejected:
            return stock.reason

        try:
            self._ledger.append(bill)
        except (TypeError, ValueError):
            for product_id, quantity in movements:
                self._catalog.restock(product_id, quantity)
            logger.error(
                f"Bill {bill.bill_number} refused by ledger; "
                f"stock for {len(movements)} line(s) restored"
            )
            raise
        return None

    def _build_bill(self, breakdown: PricingBreakdown) -> Bill:
        cart = self._cart
        return Bill(
            bill_id=self._bill_id_factory(),
            bill_number=self._ledger.next_bill_number(
                self._settings.bill_number_prefix,
            ),
            items=cart.items,
            subtotal=breakdown.subtotal,
            tax_amount=breakdown.tax_amount,
            discount_amount=breakdown.discount_amount,
            total=breakdown.total,
            discount_percent=cart.discount_percent,
            tax_rate=self._settings.tax_rate,
            issued_at=self._clock.now_utc(),
            customer_name=cart.customer_name.strip(),
            customer_phone=cart.customer_phone.strip(),
            payment_method=cart.payment_method,
        )

    def _rejected_event(self, rejection: RejectionReason) -> EngineEvent:
        return self._event(
            BILLING_BILL_REJECTED_V1,
            build_bill_rejected_payload(rejection, self._cart),
        )

    def _event(self, event_type: str, payload: dict) -> EngineEvent:
        return EngineEvent(
            event_type=event_type,
            payload=payload,
            occurred_at=self._clock.now_utc(),
        )

    # ── Ledger reads ──────────────────────────────────────────

    def bills(self) -> Tuple[Bill, ...]:
        return self._ledger.all()

    def bill_count(self) -> int:
        return self._ledger.count()

    # ── Snapshot ──────────────────────────────────────────────

    def to_snapshot(self) -> dict:
        """{catalog, cart, ledger} as plain data (ledger newest-first)."""
        with self._lock:
            return {
                "catalog": self._catalog.to_dict(),
                "cart": self._cart.to_dict(),
                "ledger": self._ledger.to_dict(),
            }

    @classmethod
    def from_snapshot(
        cls,
        data: dict,
        *,
        settings: Optional[EngineSettings] = None,
        clock: Optional[Clock] = None,
        subscriber_registry: Optional[SubscriberRegistry] = None,
    ) -> BillingService:
        missing = [key for key in SNAPSHOT_KEYS if key not in data]
        if missing:
            raise ValueError(f"Snapshot missing keys: {', '.join(missing)}.")

        service = cls(
            catalog=Catalog.from_dict(data["catalog"]),
            ledger=BillLedger.from_dict(data["ledger"]),
            settings=settings,
            clock=clock,
            subscriber_registry=subscriber_registry,
        )
        service._cart.load(data["cart"])
        logger.info(
            f"Billing state restored: {service._catalog.count()} product(s), "
            f"{len(service._cart.items)} cart line(s), "
            f"{service._ledger.count()} bill(s)"
        )
        return service


__all__ = [
    "BillingService",
    "CommitPhase",
    "SNAPSHOT_KEYS",
]
