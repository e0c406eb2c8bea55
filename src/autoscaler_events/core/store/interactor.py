# src/autoscaler_events/core/store/interactor.py
"""Event store operations over the autoscaler event table.

Every method issues a single statement in its own transaction via
EventDB.connection(). Nothing is cached and nothing is retried: database
errors propagate unchanged, and retry policy belongs to the caller.
"""

from datetime import UTC, datetime, timedelta

from sqlalchemy import and_, delete, func, or_, select, update

from autoscaler_events.core.clock import DEFAULT_CLOCK, Clock
from autoscaler_events.core.logging import get_logger
from autoscaler_events.core.store.database import EventDB
from autoscaler_events.core.store.errors import StateViolationError
from autoscaler_events.core.store.models import AutoScalerEvent, EventType, ExpiredEventsResult
from autoscaler_events.core.store.repositories import EventRepository, to_utc
from autoscaler_events.core.store.schema import events_table

logger = get_logger(__name__)

_EARLIEST_INSTANT = datetime.min.replace(tzinfo=UTC)


class EventInteractor:
    """Lookup, insert, update and TTL pruning of autoscaler events."""

    def __init__(self, db: EventDB, *, clock: Clock | None = None) -> None:
        """Initialize the interactor.

        Args:
            db: Event database; the interactor never closes it
            clock: Source of "now" for timestamps and expiry (default: system clock)
        """
        self._db = db
        self._clock = clock if clock is not None else DEFAULT_CLOCK
        self._events = EventRepository()

    def current_instant(self) -> datetime:
        """Return "now" according to the interactor's clock."""
        return self._clock.now()

    def query_latest_event(self, job_key: str, reason: str, event_key: str) -> AutoScalerEvent | None:
        """Find the most recent event of a series.

        Fetches every row of the series and keeps the one with the largest id.
        ORDER BY ... LIMIT 1 would be cheaper, but row-limiting syntax is not
        uniform across backends, and create_time cannot decide recency.

        Returns:
            The latest event, or None if the series has no rows
        """
        query = select(events_table).where(
            and_(
                events_table.c.job_key == job_key,
                events_table.c.reason == reason,
                events_table.c.event_key == event_key,
            )
        )

        latest: AutoScalerEvent | None = None
        with self._db.connection() as conn:
            for row in conn.execute(query):
                current = self._events.load(row)
                if latest is None or latest.id < current.id:
                    latest = current
        return latest

    def query_events(self, job_key: str, reason: str) -> list[AutoScalerEvent]:
        """Return all events for a job and reason, in database order.

        Intended for diagnostics and tests; the dedup path uses
        query_latest_event().
        """
        query = select(events_table).where(
            and_(
                events_table.c.job_key == job_key,
                events_table.c.reason == reason,
            )
        )
        with self._db.connection() as conn:
            return [self._events.load(row) for row in conn.execute(query)]

    def create_event(
        self,
        job_key: str,
        reason: str,
        event_type: EventType | str,
        message: str,
        event_key: str,
        create_time: datetime | None = None,
    ) -> None:
        """Insert a new event with event_count = 1.

        No uniqueness is enforced: callers decide between create_event() and
        update_event() using query_latest_event().

        Args:
            create_time: Creation instant; defaults to the clock's now.
                update_time starts equal to it.
        """
        timestamp = to_utc(create_time if create_time is not None else self._clock.now())
        stmt = events_table.insert().values(
            create_time=timestamp,
            update_time=timestamp,
            job_key=job_key,
            reason=reason,
            event_type=str(event_type),
            message=message,
            event_count=1,
            event_key=event_key,
        )
        with self._db.connection() as conn:
            conn.execute(stmt)
        logger.debug("event_created", job_key=job_key, reason=reason, event_key=event_key)

    def update_event(self, event_id: int, message: str, event_count: int) -> None:
        """Fold a repeat occurrence into an existing event.

        Sets update_time to now and overwrites message and event_count.

        Raises:
            StateViolationError: If the update did not affect exactly one row.
                The transaction is rolled back.
        """
        stmt = (
            update(events_table)
            .where(events_table.c.id == event_id)
            .values(
                update_time=to_utc(self._clock.now()),
                message=message,
                event_count=event_count,
            )
        )
        with self._db.connection() as conn:
            affected = conn.execute(stmt).rowcount
            if affected != 1:
                logger.error("event_update_state_violation", event_id=event_id, affected_rows=affected)
                raise StateViolationError(event_id, affected)
        logger.debug("event_updated", event_id=event_id, event_count=event_count)

    def query_expired_events_and_max_id(self, ttl: timedelta) -> ExpiredEventsResult | None:
        """Count expired events and find the largest expired id.

        The cutoff is now - ttl. The boundary is the first row in id order
        that is NOT expired; only rows below it count, so a row with a skewed
        (old) create_time inserted after a live row is never reported as
        expired. With no live row the boundary is unbounded.

        Boundary and aggregate run as one statement so they see the same
        snapshot. A ttl reaching back past the earliest representable instant
        clamps the cutoff there, so nothing is expired.

        Returns:
            Count and max id of expired rows, or None if the aggregate
            returned no row
        """
        try:
            cutoff = to_utc(self._clock.now() - ttl)
        except OverflowError:
            cutoff = _EARLIEST_INSTANT

        live = events_table.alias("live")
        boundary = select(live.c.id).where(live.c.create_time >= cutoff).order_by(live.c.id.asc()).limit(1).scalar_subquery()

        query = select(
            func.count().label("records_num"),
            func.max(events_table.c.id).label("max_target_id"),
        ).where(
            and_(
                events_table.c.create_time < cutoff,
                or_(boundary.is_(None), events_table.c.id < boundary),
            )
        )

        with self._db.connection() as conn:
            row = conn.execute(query).fetchone()
        if row is None:
            return None

        return ExpiredEventsResult(
            expired_records=int(row.records_num),
            max_id=int(row.max_target_id) if row.max_target_id is not None else None,
        )

    def delete_expired_events_by_max_id_and_batch(self, max_target_id: int, batch: int) -> int:
        """Delete at most `batch` events with id <= max_target_id.

        Which eligible rows go first is up to the database. Calling again
        once nothing is eligible is a no-op.

        The limit lives in a derived table so the same statement compiles on
        backends without DELETE ... LIMIT, and on MySQL, which rejects LIMIT
        directly inside an IN subquery.

        Returns:
            Number of rows deleted

        Raises:
            ValueError: If batch is not positive
        """
        if batch <= 0:
            raise ValueError(f"batch must be positive, got {batch}")

        eligible = select(events_table.c.id).where(events_table.c.id <= max_target_id).limit(batch).subquery("eligible")
        stmt = delete(events_table).where(events_table.c.id.in_(select(eligible.c.id)))

        with self._db.connection() as conn:
            deleted = conn.execute(stmt).rowcount
        logger.debug("expired_events_deleted", max_target_id=max_target_id, batch=batch, deleted=deleted)
        return int(deleted)
