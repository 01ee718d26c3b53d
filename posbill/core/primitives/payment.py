"""
POSBILL Payment Primitive
===========================
The fixed set of tender types a counter accepts. Payment capture itself
happens outside the engine; the bill only records which method was used.
"""

from __future__ import annotations

from enum import Enum
from typing import Union


class PaymentMethod(Enum):
    CASH = "Cash"
    CARD = "Card"
    UPI = "UPI"
    NET_BANKING = "NetBanking"

    @classmethod
    def parse(cls, value: Union[PaymentMethod, str]) -> PaymentMethod:
        """
        Accept the enum itself, its value ("NetBanking") or its name
        ("NET_BANKING"). Raises ValueError for anything else.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value == member.value or value == member.name:
                    return member
        raise ValueError(f"'{value}' is not a valid payment method.")


DEFAULT_PAYMENT_METHOD = PaymentMethod.CASH
