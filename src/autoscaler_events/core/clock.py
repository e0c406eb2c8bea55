# src/autoscaler_events/core/clock.py
"""Clock abstraction for testable event timestamps.

Event rows carry wall-clock instants (create_time, update_time), and the
retention cutoff is computed relative to "now". Abstracting the clock lets
tests pin those instants instead of racing the system time.

Production code uses SystemClock (the default).
Tests inject MockClock to control time advancement.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Abstract wall clock for event timestamps and expiry cutoffs.

    Implementations:
    - SystemClock: Uses datetime.now(UTC) (production)
    - MockClock: Returns controllable instants (testing)
    """

    def now(self) -> datetime:
        """Return the current instant as a UTC-aware datetime."""
        ...


class SystemClock:
    """Production clock backed by the system wall clock."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class MockClock:
    """Controllable clock for deterministic testing.

    Example:
        clock = MockClock(start=datetime(2024, 1, 1, tzinfo=UTC))
        interactor = EventInteractor(db, clock=clock)

        interactor.create_event(...)  # create_time = 2024-01-01
        clock.advance(timedelta(days=4))
        interactor.query_expired_events_and_max_id(timedelta(days=3))
    """

    def __init__(self, start: datetime | None = None) -> None:
        """Initialize mock clock at a given instant.

        Args:
            start: Initial instant (default 2024-01-01T00:00:00Z). Naive
                values are interpreted as UTC.
        """
        if start is None:
            start = datetime(2024, 1, 1, tzinfo=UTC)
        self._current = _as_utc(start)

    def now(self) -> datetime:
        return self._current

    def advance(self, delta: timedelta) -> None:
        """Advance mock time.

        Raises:
            ValueError: If delta is negative.
        """
        if delta < timedelta(0):
            raise ValueError(f"Cannot advance time by negative amount: {delta}")
        self._current += delta

    def set(self, value: datetime) -> None:
        """Set mock time to an absolute instant.

        Unlike advance(), this can move time backwards, which is how tests
        simulate clock skew between writers.
        """
        self._current = _as_utc(value)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


# Default clock for production use
DEFAULT_CLOCK: Clock = SystemClock()
