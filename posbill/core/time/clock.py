"""
POSBILL Core Time: Injectable Clock
=====================================
Bills are stamped with the time of commit. Engine code never calls
datetime.now() directly; it asks the Clock it was built with, so
tests can pin the timestamp.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now_utc(self) -> datetime:
        ...  # pragma: no cover


class SystemClock:
    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Always reports the same aware instant, e.g. for bill issued_at in tests."""

    def __init__(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._instant = instant

    def now_utc(self) -> datetime:
        return self._instant.astimezone(timezone.utc)
