"""Retention management for stored autoscaler events."""

from autoscaler_events.core.retention.cleanup import CleanupResult, EventCleaner

__all__ = ["CleanupResult", "EventCleaner"]
