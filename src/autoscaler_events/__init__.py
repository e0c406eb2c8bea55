"""
autoscaler-events: durable storage for autoscaler-generated events.

Repeated occurrences of the same logical event are folded into one row,
and expired events are pruned in bounded batches.
"""

__version__ = "0.1.0"
