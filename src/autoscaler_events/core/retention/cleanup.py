# src/autoscaler_events/core/retention/cleanup.py
"""Cleanup of expired autoscaler events.

Computes the expired set once, then removes it with bounded deletes so no
single statement holds locks on the whole table. A crash between batches
leaves some expired rows behind; the next cleanup cycle removes them.
"""

import math
from dataclasses import dataclass
from datetime import timedelta
from time import perf_counter

from autoscaler_events.core.logging import get_logger
from autoscaler_events.core.store.interactor import EventInteractor

logger = get_logger(__name__)


@dataclass
class CleanupResult:
    """Result of one cleanup cycle."""

    expired_records: int
    max_target_id: int | None
    deleted_count: int
    batches: int
    duration_seconds: float


class EventCleaner:
    """Deletes events older than the configured TTL in bounded batches."""

    def __init__(self, interactor: EventInteractor, ttl: timedelta, batch_size: int) -> None:
        """Initialize EventCleaner.

        Args:
            interactor: Event store to prune
            ttl: Events created longer ago than this are expired
            batch_size: Maximum rows removed per delete statement

        Raises:
            ValueError: If ttl or batch_size is not positive
        """
        if ttl <= timedelta(0):
            raise ValueError(f"ttl must be positive, got {ttl}")
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._interactor = interactor
        self._ttl = ttl
        self._batch_size = batch_size

    def clean_expired_events(self) -> CleanupResult:
        """Run one cleanup cycle.

        Issues ceil(expired / batch_size) deletes bounded by the max expired
        id, stopping early when a batch removes nothing (another worker got
        there first).
        """
        start = perf_counter()
        expired = self._interactor.query_expired_events_and_max_id(self._ttl)
        if expired is None or expired.expired_records == 0 or expired.max_id is None:
            logger.info("no_expired_events", ttl_seconds=self._ttl.total_seconds())
            return CleanupResult(
                expired_records=0,
                max_target_id=None,
                deleted_count=0,
                batches=0,
                duration_seconds=perf_counter() - start,
            )

        planned = math.ceil(expired.expired_records / self._batch_size)
        logger.info(
            "cleaning_expired_events",
            expired_records=expired.expired_records,
            max_target_id=expired.max_id,
            batches=planned,
        )

        deleted_count = 0
        batches = 0
        for _ in range(planned):
            deleted = self._interactor.delete_expired_events_by_max_id_and_batch(expired.max_id, self._batch_size)
            batches += 1
            if deleted == 0:
                break
            deleted_count += deleted

        duration = perf_counter() - start
        logger.info(
            "expired_events_cleaned",
            deleted_count=deleted_count,
            batches=batches,
            duration_seconds=round(duration, 3),
        )
        return CleanupResult(
            expired_records=expired.expired_records,
            max_target_id=expired.max_id,
            deleted_count=deleted_count,
            batches=batches,
            duration_seconds=duration,
        )
