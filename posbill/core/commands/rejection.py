"""
POSBILL Command Layer: Rejection Model
========================================
Why an operator action was refused.

Business-rule violations (out of stock, blank customer, negative
price, ...) are values, not exceptions: a RejectionReason travels
inside a rejected Outcome and the UI shows `message` as-is. The same
state and input always produce the same code and message.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields


@dataclass(frozen=True)
class RejectionReason:
    """
    code:        ReasonCode constant, stable across releases.
    message:     Operator-facing sentence.
    policy_name: The policy function that refused the action.
    """

    code: str
    message: str
    policy_name: str

    def __post_init__(self):
        for field_ in fields(self):
            value = getattr(self, field_.name)
            if not isinstance(value, str) or not value:
                raise ValueError(f"{field_.name} must be a non-empty string.")

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> RejectionReason:
        return cls(
            code=data["code"],
            message=data["message"],
            policy_name=data["policy_name"],
        )


# ══════════════════════════════════════════════════════════════
# REASON CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """Grouped by the engine that emits them."""

    # ── Catalog ───────────────────────────────────────────────
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"

    # ── Cart ──────────────────────────────────────────────────
    OUT_OF_STOCK = "OUT_OF_STOCK"
    STOCK_EXCEEDED = "STOCK_EXCEEDED"
    INVALID_PRICE = "INVALID_PRICE"
    LINE_ITEM_NOT_FOUND = "LINE_ITEM_NOT_FOUND"
    INVALID_PAYMENT_METHOD = "INVALID_PAYMENT_METHOD"

    # ── Bill commit ───────────────────────────────────────────
    EMPTY_BILL = "EMPTY_BILL"
    MISSING_CUSTOMER = "MISSING_CUSTOMER"

    # ── Ledger ────────────────────────────────────────────────
    DUPLICATE_BILL = "DUPLICATE_BILL"


ALL_REASON_CODES = frozenset(
    value for name, value in vars(ReasonCode).items()
    if name.isupper()
)
