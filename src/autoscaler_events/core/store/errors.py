# src/autoscaler_events/core/store/errors.py
"""Exceptions raised by the event store.

Database failures are NOT wrapped here: SQLAlchemy exceptions propagate to
the caller unchanged.
"""


class StateViolationError(RuntimeError):
    """Raised when an update affects a row count other than exactly one.

    Signals a logic or concurrency bug upstream (the row was deleted under
    us, or ids collided). It is not a transient condition and must not be
    retried.

    Attributes:
        event_id: The id the update targeted
        affected_rows: Rows the database reported as updated
    """

    def __init__(self, event_id: int, affected_rows: int) -> None:
        self.event_id = event_id
        self.affected_rows = affected_rows
        super().__init__(f"Update event id=[{event_id}] fails: expected exactly 1 affected row, got {affected_rows}")
