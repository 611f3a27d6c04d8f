"""Root logger setup for trackselect.

Text lines look like

    2024-05-01T10:00:00+0000 DEBUG   [mp:mp-1 job:job-7] trackselect...: ...

where the bracketed tag is present only while a media package (and a
compute job within it) is being processed.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from trackselect.logging.context import OperationContextFilter
from trackselect.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from trackselect.config.models import LoggingConfig

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(context_tag)s%(name)s: %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# httpx logs every poll of a job at INFO
_CHATTY_LOGGERS = ("httpx", "httpcore")


def _formatter(config: LoggingConfig) -> logging.Formatter:
    if config.format.lower() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


def _open_log_file(config: LoggingConfig) -> logging.Handler | None:
    """Open the rotating log file, or warn on stderr and return None."""
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"Warning: Could not open log file {path}: {e}\n")
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Configure the root logger from a LoggingConfig.

    Replaces any existing root handlers. Logs go to the configured file, to
    stderr when include_stderr is set, and to stderr as a fallback when no
    file is configured or it cannot be opened.
    """
    level = logging.getLevelName(config.level.upper())

    handlers: list[logging.Handler] = []
    if config.file:
        file_handler = _open_log_file(config)
        if file_handler is not None:
            handlers.append(file_handler)
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = _formatter(config)
    context_filter = OperationContextFilter()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    for handler in handlers:
        root_logger.addHandler(handler)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(
            logging.DEBUG if level == logging.DEBUG else logging.WARNING
        )
