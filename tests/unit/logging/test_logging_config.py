"""Unit tests for logging configuration and JSON output."""

import json
import logging
import sys
from pathlib import Path

import pytest

from trackselect.config.models import LoggingConfig
from trackselect.logging.config import configure_logging
from trackselect.logging.context import (
    OperationContextFilter,
    job_context,
    operation_context,
)
from trackselect.logging.handlers import JSONFormatter


@pytest.fixture(autouse=True)
def reset_root_logger():
    """Save and restore root logger state between tests."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    for handler in root.handlers:
        if handler not in original_handlers:
            handler.close()
    root.handlers[:] = original_handlers
    root.setLevel(original_level)


class TestConfigureLogging:
    """Tests for configure_logging()."""

    @pytest.mark.parametrize(
        "level,expected",
        [
            ("debug", logging.DEBUG),
            ("info", logging.INFO),
            ("WARNING", logging.WARNING),
            ("error", logging.ERROR),
        ],
    )
    def test_levels(self, level: str, expected: int) -> None:
        configure_logging(LoggingConfig(level=level))
        assert logging.getLogger().level == expected

    def test_stderr_only(self) -> None:
        """Without a file a single stderr handler is installed."""
        configure_logging(LoggingConfig(file=None))

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)

    def test_file_handler(self, tmp_path: Path) -> None:
        """Records go to the rotating file with the media package tag."""
        log_file = tmp_path / "logs" / "trackselect.log"
        configure_logging(LoggingConfig(file=log_file))

        with operation_context("mp-7"):
            logging.getLogger("trackselect.test").info("muxing")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text()
        assert "INFO    [mp:mp-7] trackselect.test: muxing" in content

    def test_file_and_stderr(self, tmp_path: Path) -> None:
        configure_logging(
            LoggingConfig(file=tmp_path / "ts.log", include_stderr=True)
        )
        assert len(logging.getLogger().handlers) == 2

    def test_json_format(self, tmp_path: Path) -> None:
        configure_logging(LoggingConfig(format="json"))
        handler = logging.getLogger().handlers[0]
        assert isinstance(handler.formatter, JSONFormatter)

    def test_job_tag_in_text_format(self, tmp_path: Path) -> None:
        """Records emitted while waiting on a job name the job."""
        log_file = tmp_path / "trackselect.log"
        configure_logging(LoggingConfig(file=log_file))

        with operation_context("mp-7"), job_context("job-3"):
            logging.getLogger("trackselect.test").info("waiting")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "[mp:mp-7 job:job-3] trackselect.test: waiting" in log_file.read_text()

    @pytest.mark.parametrize(
        "level,expected", [("info", logging.WARNING), ("debug", logging.DEBUG)]
    )
    def test_http_client_logging_quieted(self, level: str, expected: int) -> None:
        """Per-request httpx logs only show up at debug level."""
        configure_logging(LoggingConfig(level=level))
        assert logging.getLogger("httpx").level == expected


class TestJSONFormatter:
    """Tests for JSONFormatter output."""

    def _record(self, msg: str = "msg", exc_info=None) -> logging.LogRecord:
        return logging.LogRecord(
            "trackselect.selection.engine",
            logging.INFO,
            __file__,
            1,
            msg,
            None,
            exc_info,
        )

    def _format(self, record: logging.LogRecord) -> dict:
        return json.loads(JSONFormatter().format(record))

    def test_basic_fields(self) -> None:
        record = logging.LogRecord(
            "trackselect.engine", logging.INFO, __file__, 1, "Composed %d", (2,), None
        )
        entry = self._format(record)
        assert entry["level"] == "INFO"
        assert entry["message"] == "Composed 2"
        assert entry["logger"] == "trackselect.engine"
        assert "timestamp" in entry
        assert set(entry) == {"timestamp", "level", "logger", "message"}

    def test_processing_context_is_top_level(self) -> None:
        """Media package, operation and job are filterable keys."""
        record = self._record()
        with operation_context("mp-1", "select-tracks"), job_context("job-3"):
            OperationContextFilter().filter(record)

        entry = self._format(record)
        assert entry["mediapackage"] == "mp-1"
        assert entry["operation"] == "select-tracks"
        assert entry["job"] == "job-3"
        assert "extra" not in entry
        assert "context_tag" not in entry

    def test_queue_time_is_top_level(self) -> None:
        record = self._record()
        record.queue_time_ms = 0
        assert self._format(record)["queue_time_ms"] == 0

    def test_other_extras_are_nested(self) -> None:
        record = self._record()
        record.manifest = "in/a.json"
        assert self._format(record)["extra"] == {"manifest": "in/a.json"}

    def test_exception(self) -> None:
        try:
            raise ValueError("bad")
        except ValueError:
            exc_info = sys.exc_info()
        entry = self._format(self._record(exc_info=exc_info))
        assert "ValueError: bad" in entry["exception"]
