# src/autoscaler_events/core/store/schema.py
"""SQLAlchemy table definition for the autoscaler event table.

Uses SQLAlchemy Core (not ORM) for explicit control over queries
and compatibility with multiple database backends.
"""

from sqlalchemy import BigInteger, Column, DateTime, Index, Integer, MetaData, String, Table, Text

metadata = MetaData()

EVENT_TABLE_NAME = "t_flink_autoscaler_event_handler"

# SQLite only auto-assigns INTEGER PRIMARY KEY columns (ROWID alias), so the
# BigInteger identity falls back to Integer there.
_EVENT_ID_TYPE = BigInteger().with_variant(Integer(), "sqlite")

events_table = Table(
    EVENT_TABLE_NAME,
    metadata,
    Column("id", _EVENT_ID_TYPE, primary_key=True, autoincrement=True),
    Column("create_time", DateTime(timezone=True), nullable=False),
    Column("update_time", DateTime(timezone=True), nullable=False),
    Column("job_key", String(191), nullable=False),
    Column("reason", String(500), nullable=False),
    Column("event_type", String(100), nullable=False),
    Column("message", Text, nullable=False),
    Column("event_count", Integer, nullable=False),
    Column("event_key", String(100), nullable=False),
    # Series lookup: equality on the three keys, latest picked by id
    Index("ix_autoscaler_events_series", "job_key", "reason", "event_key", "id"),
    # Expiry boundary and aggregate both range-scan create_time
    Index("ix_autoscaler_events_create_time", "create_time"),
)
