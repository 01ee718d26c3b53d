"""
POSBILL Event Bus: Engine Event
=================================
Immutable notification emitted by an engine after a state change.
Payload is plain data (see each engine's payload builders).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class EngineEvent:
    event_type: str
    payload: dict
    occurred_at: datetime
    event_id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self):
        if not self.event_type or not isinstance(self.event_type, str):
            raise ValueError("event_type must be a non-empty string.")
        if not isinstance(self.payload, dict):
            raise TypeError("payload must be a dict.")
        if not isinstance(self.occurred_at, datetime):
            raise ValueError("occurred_at must be a datetime.")

    @property
    def source_engine(self) -> str:
        return self.event_type.split(".")[0]

    def to_dict(self) -> dict:
        return {
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "occurred_at": self.occurred_at.isoformat(),
            "payload": self.payload,
        }
