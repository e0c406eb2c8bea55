# src/autoscaler_events/core/store/repositories.py
"""Repository layer for event rows.

Handles the seam between SQLAlchemy rows and AutoScalerEvent. The event
table is OUR data: a row with missing columns crashes here rather than
being coerced into a partial record.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy.engine import Row as SARow

from autoscaler_events.core.store.models import AutoScalerEvent


def to_utc(value: datetime) -> datetime:
    """Normalize an instant to UTC.

    SQLite returns timezone-aware columns as naive datetimes; everything we
    write is UTC, so a naive value read back is UTC by construction.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class EventRepository:
    """Repository for AutoScalerEvent records."""

    def load(self, row: SARow[Any]) -> AutoScalerEvent:
        return AutoScalerEvent(
            id=int(row.id),
            create_time=to_utc(row.create_time),
            update_time=to_utc(row.update_time),
            job_key=row.job_key,
            reason=row.reason,
            event_type=row.event_type,
            message=row.message,
            event_count=int(row.event_count),
            event_key=row.event_key,
        )
