"""
POSBILL Cart Engine
=====================
The in-progress bill: line items, discount, customer and payment fields.
"""

from posbill.engines.cart.models import LineItem, new_line_id
from posbill.engines.cart.services import Cart

__all__ = [
    "Cart",
    "LineItem",
    "new_line_id",
]
