from posbill.core.time.clock import Clock, FixedClock, SystemClock

__all__ = ["Clock", "SystemClock", "FixedClock"]
