"""Event store: persistence, lookup and pruning of autoscaler events."""

from autoscaler_events.core.store.database import EventDB
from autoscaler_events.core.store.errors import StateViolationError
from autoscaler_events.core.store.interactor import EventInteractor
from autoscaler_events.core.store.models import AutoScalerEvent, EventType, ExpiredEventsResult
from autoscaler_events.core.store.schema import events_table, metadata

__all__ = [
    "AutoScalerEvent",
    "EventDB",
    "EventInteractor",
    "EventType",
    "ExpiredEventsResult",
    "StateViolationError",
    "events_table",
    "metadata",
]
