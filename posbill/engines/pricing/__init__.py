from posbill.engines.pricing.calculator import (
    PricingBreakdown,
    clamp_discount_percent,
    compute_totals,
)

__all__ = [
    "PricingBreakdown",
    "clamp_discount_percent",
    "compute_totals",
]
