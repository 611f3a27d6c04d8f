"""JSON log output for trackselect.

One object per line. The processing context (media package, operation,
compute job) and job measurements are top-level keys so log pipelines can
filter on them; any other extra= values are nested under "extra".
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord has, plus what OperationContextFilter adds
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime", "context_tag"}

# Record attribute -> JSON key, in output order
_CONTEXT_FIELDS = (
    ("mediapackage_id", "mediapackage"),
    ("operation", "operation"),
    ("job_id", "job"),
)
_MEASUREMENT_FIELDS = ("queue_time_ms", "job_count")


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Example output:
        {"timestamp": "2024-05-01T10:00:00.123000+00:00", "level": "INFO",
         "logger": "trackselect.selection.dispatcher",
         "message": "Job job-7 produced ...", "mediapackage": "mp-1",
         "operation": "select-tracks", "job": "job-7", "queue_time_ms": 40}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for attr, key in _CONTEXT_FIELDS:
            value = getattr(record, attr, None)
            if value:
                entry[key] = value
        for attr in _MEASUREMENT_FIELDS:
            value = getattr(record, attr, None)
            if value is not None:
                entry[attr] = value

        known = {attr for attr, _ in _CONTEXT_FIELDS} | set(_MEASUREMENT_FIELDS)
        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and key not in known and not key.startswith("_")
        }
        if extra:
            entry["extra"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
