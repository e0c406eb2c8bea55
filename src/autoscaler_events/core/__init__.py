"""Core subsystems: event storage, retention, configuration and logging."""
