"""
POSBILL Command Layer
=======================
Every operator action produces exactly one Outcome.
REJECTED outcomes are first-class citizens, never exceptions.
"""

from posbill.core.commands.outcomes import (
    Outcome,
    OutcomeStatus,
)
from posbill.core.commands.rejection import (
    ALL_REASON_CODES,
    ReasonCode,
    RejectionReason,
)

__all__ = [
    # ── Outcomes ──────────────────────────────────────────────
    "Outcome",
    "OutcomeStatus",
    # ── Rejection ─────────────────────────────────────────────
    "RejectionReason",
    "ReasonCode",
    "ALL_REASON_CODES",
]
