"""Operation context for structured logging.

Uses contextvars so that every log record emitted while a media package is
being processed carries its identifier, including records from concurrent
invocations running in other threads.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_mediapackage_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "mediapackage_id", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)
_job_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job_id", default=None
)


def set_operation_context(mediapackage_id: str, operation: str | None = None) -> None:
    """Set the current operation context."""
    _mediapackage_id.set(mediapackage_id)
    _operation.set(operation)


def clear_operation_context() -> None:
    """Clear the current operation context."""
    _mediapackage_id.set(None)
    _operation.set(None)


@contextmanager
def operation_context(
    mediapackage_id: str,
    operation: str | None = None,
) -> Generator[None, None, None]:
    """Context manager that tags log records with a media package.

    Restores the previous context on exit.

    Example:
        with operation_context("mp-1", "select-tracks"):
            logger.info("Muxing")  # rendered with [mp:mp-1]
    """
    old_mediapackage_id = _mediapackage_id.get()
    old_operation = _operation.get()
    try:
        set_operation_context(mediapackage_id, operation)
        yield
    finally:
        _mediapackage_id.set(old_mediapackage_id)
        _operation.set(old_operation)


def get_operation_context() -> tuple[str | None, str | None]:
    """Return (mediapackage_id, operation); either may be None."""
    return _mediapackage_id.get(), _operation.get()


@contextmanager
def job_context(job_id: str) -> Generator[None, None, None]:
    """Tag log records with the compute job being waited on."""
    token = _job_id.set(job_id)
    try:
        yield
    finally:
        _job_id.reset(token)


def get_job_id() -> str | None:
    """Return the current compute job identifier, if any."""
    return _job_id.get()


class OperationContextFilter(logging.Filter):
    """Logging filter that injects the operation context into records.

    Adds mediapackage_id, operation and job_id attributes, plus a compact
    context_tag such as "[mp:1234 job:job-7] " for the text format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        mediapackage_id, operation = get_operation_context()
        # A job_id passed via extra= is kept outside a job context
        job_id = get_job_id() or getattr(record, "job_id", None)

        record.mediapackage_id = mediapackage_id
        record.operation = operation
        record.job_id = job_id

        parts = []
        if mediapackage_id:
            parts.append(f"mp:{mediapackage_id}")
        if job_id:
            parts.append(f"job:{job_id}")
        record.context_tag = f"[{' '.join(parts)}] " if parts else ""

        return True
