"""
POSBILL Command Layer: Outcome Contract
=========================================
Every operator action produces exactly one Outcome.

ACCEPTED → the action took effect; `value` carries its result (if any).
REJECTED → nothing changed; `reason` is mandatory.

Rules:
- Outcome is immutable (frozen dataclass)
- REJECTED must contain reason (RejectionReason)
- ACCEPTED must NOT contain reason
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from posbill.core.commands.rejection import RejectionReason


# ══════════════════════════════════════════════════════════════
# OUTCOME STATUS
# ══════════════════════════════════════════════════════════════

class OutcomeStatus(Enum):
    """Binary decision. No middle ground."""
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


# ══════════════════════════════════════════════════════════════
# OUTCOME
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Outcome:
    """
    Tagged result of an engine operation.

    Fields:
        status: ACCEPTED or REJECTED.
        reason: RejectionReason (mandatory if REJECTED, None if ACCEPTED).
        value:  Result payload of an accepted operation (Bill, LineItem...).

    Invariants:
        - REJECTED + reason is None → ValueError
        - ACCEPTED + reason is not None → ValueError
        - REJECTED + value is not None → ValueError
    """

    status: OutcomeStatus
    reason: Optional[RejectionReason] = None
    value: Any = None

    def __post_init__(self):
        if not isinstance(self.status, OutcomeStatus):
            raise ValueError(
                f"status must be OutcomeStatus, got {type(self.status).__name__}."
            )

        if self.status == OutcomeStatus.REJECTED:
            if self.reason is None:
                raise ValueError(
                    "REJECTED outcome must include a RejectionReason. "
                    "No silent rejections allowed."
                )
            if self.value is not None:
                raise ValueError("REJECTED outcome must NOT carry a value.")

        if self.status == OutcomeStatus.ACCEPTED and self.reason is not None:
            raise ValueError(
                "ACCEPTED outcome must NOT include a RejectionReason."
            )

    @classmethod
    def accept(cls, value: Any = None) -> Outcome:
        return cls(status=OutcomeStatus.ACCEPTED, value=value)

    @classmethod
    def reject(cls, reason: RejectionReason) -> Outcome:
        if not isinstance(reason, RejectionReason):
            raise TypeError("reason must be RejectionReason.")
        return cls(status=OutcomeStatus.REJECTED, reason=reason)

    @property
    def is_accepted(self) -> bool:
        return self.status == OutcomeStatus.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        return self.status == OutcomeStatus.REJECTED

    @property
    def code(self) -> Optional[str]:
        """Rejection code, or None when accepted."""
        return self.reason.code if self.reason is not None else None
