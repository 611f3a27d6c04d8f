"""Structured logging module for trackselect.

Provides configurable logging with JSON format support and file rotation,
plus a per-operation context for concurrent media package processing.
"""

from trackselect.logging.config import configure_logging
from trackselect.logging.context import (
    OperationContextFilter,
    clear_operation_context,
    get_job_id,
    get_operation_context,
    job_context,
    operation_context,
    set_operation_context,
)
from trackselect.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "OperationContextFilter",
    "clear_operation_context",
    "configure_logging",
    "get_job_id",
    "get_operation_context",
    "job_context",
    "operation_context",
    "set_operation_context",
]
