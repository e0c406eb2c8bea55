# src/autoscaler_events/core/logging.py
"""Structured logging for autoscaler-events.

structlog and stdlib logging share one processor chain: stdlib records
(SQLAlchemy's loggers included) are routed through structlog's
ProcessorFormatter, so every line has the same shape.

Log lines go to stderr. stdout belongs to command output, e.g. the event
listings printed by the CLI.

In JSON output the log message is stored under "msg" rather than
structlog's default "event", which would be ambiguous next to fields that
describe autoscaler events.
"""

import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.stdlib import ProcessorFormatter

# Statement and pool checkout chatter at INFO/DEBUG
_SQLALCHEMY_LOGGERS: tuple[str, ...] = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "sqlalchemy.pool",
    "sqlalchemy.dialects",
)


def _drop_formatter_bookkeeping(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    # ProcessorFormatter always sets both keys; a KeyError means the wiring is broken
    del event_dict["_record"]
    del event_dict["_from_structlog"]
    return event_dict


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]


def _render_processors(json_output: bool) -> list[Any]:
    if json_output:
        return [
            _drop_formatter_bookkeeping,
            structlog.processors.format_exc_info,
            structlog.processors.EventRenamer("msg"),
            structlog.processors.JSONRenderer(),
        ]
    return [
        _drop_formatter_bookkeeping,
        structlog.dev.ConsoleRenderer(colors=False),
    ]


def _resolve_level(level: str) -> int:
    levels = logging.getLevelNamesMapping()
    name = level.upper()
    if name not in levels:
        raise ValueError(f"Unknown log level: {level!r}")
    return levels[name]


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Replaces any handlers already on the root logger, so calling it again
    reconfigures rather than duplicating output.

    Args:
        json_output: Emit one JSON object per line instead of console text.
        level: Root log level name, case-insensitive.
        stream: Destination (default: sys.stderr at call time).

    Raises:
        ValueError: If level is not a known log level name.
    """
    log_level = _resolve_level(level)
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Tests reconfigure logging; cached loggers would keep stale config
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(ProcessorFormatter(processors=_render_processors(json_output), foreign_pre_chain=shared))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    # Never looser than the root level
    sqlalchemy_level = max(log_level, logging.WARNING)
    for name in _SQLALCHEMY_LOGGERS:
        logging.getLogger(name).setLevel(sqlalchemy_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a bound logger for a module (pass __name__)."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
