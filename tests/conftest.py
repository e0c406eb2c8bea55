# tests/conftest.py
"""Shared test fixtures.

Event store fixtures:
- event_db: Fresh in-memory SQLite event table per test
- clock: MockClock pinned at 2024-01-01T00:00:00Z
- interactor: EventInteractor wired to both

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import logging
import os
from collections.abc import Iterator
from datetime import UTC, datetime

import pytest
from hypothesis import Phase, Verbosity, settings

from autoscaler_events.core.clock import MockClock
from autoscaler_events.core.store import EventDB, EventInteractor

FIXED_NOW = datetime(2024, 1, 1, tzinfo=UTC)


@pytest.fixture
def event_db() -> Iterator[EventDB]:
    """Function-scoped: pruning tests depend on exact table contents."""
    db = EventDB.in_memory()
    yield db
    db.close()


@pytest.fixture
def clock() -> MockClock:
    return MockClock(start=FIXED_NOW)


@pytest.fixture
def interactor(event_db: EventDB, clock: MockClock) -> EventInteractor:
    return EventInteractor(event_db, clock=clock)


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    """configure_logging() replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Database round trips make timing vary
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
