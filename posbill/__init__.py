"""
POSBILL: point-of-sale billing engine.

Catalog → Cart → Pricing → Bill commit → Ledger.
"""

__version__ = "0.1.0"
