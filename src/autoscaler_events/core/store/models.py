# src/autoscaler_events/core/store/models.py
"""Dataclass models for the autoscaler event table."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class EventType(StrEnum):
    """Classification of an autoscaler event.

    Stored in the database (event_type) as a free-form string; callers may
    write labels outside this enum and they are read back verbatim.
    """

    NORMAL = "Normal"
    WARNING = "Warning"


@dataclass(frozen=True)
class AutoScalerEvent:
    """One stored event occurrence.

    id is assigned by the database and is the only reliable recency signal
    within a series: create_time may collide or go backwards across writers.
    """

    id: int
    create_time: datetime
    update_time: datetime
    job_key: str
    reason: str
    event_type: str
    message: str
    event_count: int
    event_key: str


@dataclass(frozen=True)
class ExpiredEventsResult:
    """Number of expired events and the largest id among them.

    max_id is None when expired_records is 0 (MAX over an empty set).
    """

    expired_records: int
    max_id: int | None
