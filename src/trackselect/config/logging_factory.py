"""Logging setup for CLI invocations.

The --log-level, --log-file and --log-json flags override the [logging]
section of the config file for a single run.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path

from trackselect.config.models import LoggingConfig


def apply_cli_overrides(
    base: LoggingConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    json_format: bool = False,
) -> LoggingConfig:
    """Return base with the given CLI flags applied.

    Unset flags keep the configured value; --log-json only ever switches the
    format to JSON.

    Raises:
        ValueError: If an override is invalid.
    """
    overrides: dict[str, object] = {}
    if level is not None:
        overrides["level"] = level
    if file is not None:
        overrides["file"] = file
    if json_format:
        overrides["format"] = "json"
    # replace() re-runs LoggingConfig validation
    return dataclasses.replace(base, **overrides)


def setup_cli_logging(
    *,
    config_path: Path | None = None,
    level: str | None = None,
    file: Path | None = None,
    json_format: bool = False,
) -> LoggingConfig:
    """Load the config file, apply CLI flags and configure the root logger."""
    from trackselect.config import get_config
    from trackselect.logging import configure_logging

    config = apply_cli_overrides(
        get_config(config_path=config_path).logging,
        level=level,
        file=file,
        json_format=json_format,
    )
    configure_logging(config)
    return config
