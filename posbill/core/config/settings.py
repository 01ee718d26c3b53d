"""
POSBILL Core Config: Engine Settings
======================================
One frozen settings object per engine instance. Built in code (tests,
embedding applications) or from POSBILL_* environment variables.

The tax rate is a single process-wide rate. Per-category or
per-region tax rules are out of scope.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Optional

from posbill.core.primitives.money import to_decimal
from posbill.core.primitives.payment import DEFAULT_PAYMENT_METHOD, PaymentMethod

ENV_PREFIX = "POSBILL_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})
_NONE_VALUES = frozenset({"", "none", "null"})


# ══════════════════════════════════════════════════════════════
# ENGINE SETTINGS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class EngineSettings:
    """
    Fields:
        tax_rate:                 0.18 means 18% (GST).
        currency_places:          Minor-unit digits used for presentation.
        bill_number_prefix:       "BILL" gives "BILL-000001".
        fallback_stock_ceiling:   Quantity ceiling when a cart line's product
                                  can no longer be resolved in the catalog.
                                  None turns that case into PRODUCT_NOT_FOUND.
        default_payment_method:   Payment method of a fresh cart.
        reset_customer_on_commit: Clear customer name/phone after a bill.
    """

    tax_rate: Decimal = Decimal("0.18")
    currency_places: int = 2
    bill_number_prefix: str = "BILL"
    fallback_stock_ceiling: Optional[int] = 999
    default_payment_method: PaymentMethod = DEFAULT_PAYMENT_METHOD
    reset_customer_on_commit: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "tax_rate", to_decimal(self.tax_rate))
        if not 0 <= self.tax_rate <= 1:
            raise ValueError(
                f"Tax rate must be between 0 and 1, got {self.tax_rate}."
            )
        if not isinstance(self.currency_places, int) or self.currency_places < 0:
            raise ValueError("currency_places must be a non-negative integer.")
        if not self.bill_number_prefix or not isinstance(self.bill_number_prefix, str):
            raise ValueError("bill_number_prefix must be a non-empty string.")
        if self.fallback_stock_ceiling is not None and (
            not isinstance(self.fallback_stock_ceiling, int)
            or self.fallback_stock_ceiling < 1
        ):
            raise ValueError("fallback_stock_ceiling must be a positive integer or None.")
        object.__setattr__(
            self,
            "default_payment_method",
            PaymentMethod.parse(self.default_payment_method),
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> EngineSettings:
        """
        Read overrides from the environment; unset variables keep defaults.

            POSBILL_TAX_RATE=0.18
            POSBILL_CURRENCY_PLACES=2
            POSBILL_BILL_NUMBER_PREFIX=BILL
            POSBILL_FALLBACK_STOCK_CEILING=999   (or "none")
            POSBILL_DEFAULT_PAYMENT_METHOD=Cash
            POSBILL_RESET_CUSTOMER_ON_COMMIT=true
        """
        env = os.environ if environ is None else environ
        kwargs = {}

        def raw(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name)
            return value.strip() if value is not None else None

        tax_rate = raw("TAX_RATE")
        if tax_rate is not None:
            kwargs["tax_rate"] = to_decimal(tax_rate)

        places = raw("CURRENCY_PLACES")
        if places is not None:
            kwargs["currency_places"] = int(places)

        prefix = raw("BILL_NUMBER_PREFIX")
        if prefix is not None:
            kwargs["bill_number_prefix"] = prefix

        ceiling = raw("FALLBACK_STOCK_CEILING")
        if ceiling is not None:
            kwargs["fallback_stock_ceiling"] = (
                None if ceiling.lower() in _NONE_VALUES else int(ceiling)
            )

        method = raw("DEFAULT_PAYMENT_METHOD")
        if method is not None:
            kwargs["default_payment_method"] = PaymentMethod.parse(method)

        reset = raw("RESET_CUSTOMER_ON_COMMIT")
        if reset is not None:
            kwargs["reset_customer_on_commit"] = _parse_bool(
                "RESET_CUSTOMER_ON_COMMIT", reset,
            )

        return cls(**kwargs)

    def to_dict(self) -> dict:
        return {
            "tax_rate": str(self.tax_rate),
            "currency_places": self.currency_places,
            "bill_number_prefix": self.bill_number_prefix,
            "fallback_stock_ceiling": self.fallback_stock_ceiling,
            "default_payment_method": self.default_payment_method.value,
            "reset_customer_on_commit": self.reset_customer_on_commit,
        }


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean, got '{value}'.")
