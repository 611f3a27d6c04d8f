"""Configuration builder with explicit layering.

ConfigBuilder composes TrackSelectConfig from several ConfigSources; later
sources override earlier ones for every value they specify.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from trackselect.config.env import EnvReader
from trackselect.config.models import (
    ComputeConfig,
    LoggingConfig,
    ProcessingConfig,
    TrackSelectConfig,
    WorkspaceConfig,
)

logger = logging.getLogger(__name__)


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None means "not specified in this source".
    """

    # Compute service
    compute_url: str | None = None
    compute_timeout: float | None = None
    compute_poll_interval: float | None = None
    compute_max_wait: float | None = None

    # Workspace
    workspace_root: Path | None = None

    # Logging
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None

    # Processing
    processing_workers: int | None = None


class ConfigBuilder:
    """Builds TrackSelectConfig by layering ConfigSources with precedence.

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(reader))
        builder.apply(ConfigSource(compute_url=cli_url))
        config = builder.build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def apply(self, source: ConfigSource, source_name: str = "unknown") -> None:
        """Apply a source; its non-None values override existing ones."""
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value
                logger.debug("Config %s set from %s", field_obj.name, source_name)

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> TrackSelectConfig:
        """Build the final TrackSelectConfig with defaults for unset values."""
        compute = ComputeConfig(
            url=self._get("compute_url", None),
            timeout_seconds=self._get("compute_timeout", 30.0),
            poll_interval=self._get("compute_poll_interval", 1.0),
            max_wait_seconds=self._get("compute_max_wait", None),
        )

        workspace_root = self._get("workspace_root", None)
        workspace = (
            WorkspaceConfig(root=workspace_root)
            if workspace_root is not None
            else WorkspaceConfig()
        )

        logging_config = LoggingConfig(
            level=self._get("logging_level", "info"),
            file=self._get("logging_file", None),
            format=self._get("logging_format", "text"),
            include_stderr=self._get("logging_include_stderr", False),
            max_bytes=self._get("logging_max_bytes", 10_485_760),
            backup_count=self._get("logging_backup_count", 5),
        )

        processing = ProcessingConfig(
            workers=self._get("processing_workers", 1),
        )

        return TrackSelectConfig(
            logging=logging_config,
            compute=compute,
            workspace=workspace,
            processing=processing,
        )


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create a ConfigSource from a parsed TOML config file."""
    compute = file_config.get("compute", {})
    workspace = file_config.get("workspace", {})
    logging_conf = file_config.get("logging", {})
    processing = file_config.get("processing", {})

    log_file_str = logging_conf.get("file")
    root_str = workspace.get("root")

    return ConfigSource(
        compute_url=compute.get("url"),
        compute_timeout=compute.get("timeout_seconds"),
        compute_poll_interval=compute.get("poll_interval"),
        compute_max_wait=compute.get("max_wait_seconds"),
        workspace_root=Path(root_str).expanduser() if root_str else None,
        logging_level=logging_conf.get("level"),
        logging_file=Path(log_file_str).expanduser() if log_file_str else None,
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
        logging_max_bytes=logging_conf.get("max_bytes"),
        logging_backup_count=logging_conf.get("backup_count"),
        processing_workers=processing.get("workers"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create a ConfigSource from TRACKSELECT_* environment variables."""
    return ConfigSource(
        compute_url=reader.get_str("TRACKSELECT_COMPUTE_URL"),
        compute_timeout=reader.get_float("TRACKSELECT_COMPUTE_TIMEOUT"),
        compute_poll_interval=reader.get_float("TRACKSELECT_POLL_INTERVAL"),
        compute_max_wait=reader.get_float("TRACKSELECT_MAX_WAIT"),
        workspace_root=reader.get_path("TRACKSELECT_WORKSPACE_ROOT"),
        logging_level=reader.get_str("TRACKSELECT_LOG_LEVEL"),
        processing_workers=reader.get_int("TRACKSELECT_WORKERS"),
    )
