# tests/core/test_logging.py
"""Tests for structured logging configuration."""

import json
import logging

import pytest


class TestLoggingConfig:
    """Tests for logging configuration."""

    def test_get_logger_returns_logger(self) -> None:
        from autoscaler_events.core.logging import get_logger

        logger = get_logger("test")
        assert hasattr(logger, "info")
        assert hasattr(logger, "error")
        assert hasattr(logger, "bind")

    def test_logger_outputs_structured(self, capsys: pytest.CaptureFixture[str]) -> None:
        from autoscaler_events.core.logging import configure_logging, get_logger

        configure_logging(json_output=True)
        logger = get_logger("test")

        logger.info("test message", key="value")

        captured = capsys.readouterr()
        log_line = captured.err.strip().split("\n")[-1]
        data = json.loads(log_line)
        assert data["msg"] == "test message"
        assert data["key"] == "value"
        assert data["level"] == "info"
        assert "_record" not in data

    def test_logger_console_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        from autoscaler_events.core.logging import configure_logging, get_logger

        configure_logging(json_output=False)
        get_logger("test").info("test message", key="value")

        captured = capsys.readouterr()
        assert "test message" in captured.err
        assert "key" in captured.err

    def test_stdlib_logging_uses_same_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        from autoscaler_events.core.logging import configure_logging

        configure_logging(json_output=True)
        logging.getLogger("plain.stdlib").warning("from stdlib")

        captured = capsys.readouterr()
        data = json.loads(captured.err.strip().split("\n")[-1])
        assert data["msg"] == "from stdlib"

    def test_level_filters_debug(self, capsys: pytest.CaptureFixture[str]) -> None:
        from autoscaler_events.core.logging import configure_logging, get_logger

        configure_logging(json_output=True, level="INFO")
        get_logger("test").debug("hidden")

        assert "hidden" not in capsys.readouterr().err

    def test_sqlalchemy_loggers_silenced(self) -> None:
        from autoscaler_events.core.logging import configure_logging

        configure_logging(level="DEBUG")

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_noisy_loggers_follow_stricter_root(self) -> None:
        from autoscaler_events.core.logging import configure_logging

        configure_logging(level="ERROR")

        assert logging.getLogger("sqlalchemy.engine").level == logging.ERROR

    def test_state_violation_is_logged(self, capsys: pytest.CaptureFixture[str]) -> None:
        from autoscaler_events.core.logging import configure_logging
        from autoscaler_events.core.store import EventDB, EventInteractor, StateViolationError

        configure_logging(json_output=True)
        interactor = EventInteractor(EventDB.in_memory())

        with pytest.raises(StateViolationError):
            interactor.update_event(99, "msg", 2)

        lines = [json.loads(line) for line in capsys.readouterr().err.strip().split("\n") if line]
        violation = [line for line in lines if line["msg"] == "event_update_state_violation"]
        assert violation
        assert violation[0]["event_id"] == 99
        assert violation[0]["level"] == "error"


class TestLoggingDestination:
    """Log lines stay off stdout and use "msg" for the message."""

    def test_stdout_left_for_command_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        from autoscaler_events.core.logging import configure_logging, get_logger

        configure_logging(json_output=True)
        get_logger("test").warning("to stderr")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "to stderr" in captured.err

    def test_explicit_stream(self) -> None:
        import io

        from autoscaler_events.core.logging import configure_logging, get_logger

        buffer = io.StringIO()
        configure_logging(json_output=True, stream=buffer)
        get_logger("test").info("expired_events_cleaned", deleted_count=3)

        data = json.loads(buffer.getvalue().strip())
        assert data["msg"] == "expired_events_cleaned"
        assert data["deleted_count"] == 3
        assert "event" not in data
        assert data["timestamp"].endswith("Z")

    def test_unknown_level_rejected(self) -> None:
        from autoscaler_events.core.logging import configure_logging

        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging(level="TRACE")
