"""Configuration data models.

This module defines dataclasses for trackselect configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class ComputeConfig:
    """Connection settings for the remote compute (composer) service."""

    url: str | None = None
    """Base URL of the compute service (e.g., "http://localhost:8080/composer")."""

    timeout_seconds: float = 30.0
    """HTTP request timeout."""

    poll_interval: float = 1.0
    """Seconds between job status polls."""

    max_wait_seconds: float | None = None
    """Give up waiting for a job after this long (None = wait indefinitely)."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.url is not None and not self.url.startswith(("http://", "https://")):
            raise ValueError("url must start with http:// or https://")
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"timeout_seconds must be positive, got {self.timeout_seconds}"
            )
        if self.poll_interval <= 0:
            raise ValueError(
                f"poll_interval must be positive, got {self.poll_interval}"
            )
        if self.max_wait_seconds is not None and self.max_wait_seconds <= 0:
            raise ValueError(
                f"max_wait_seconds must be positive, got {self.max_wait_seconds}"
            )


@dataclass
class WorkspaceConfig:
    """Configuration for the local workspace that owns media files."""

    # Root directory; files live under <root>/<mediapackage>/<element>/
    root: Path = field(
        default_factory=lambda: Path.home() / ".trackselect" / "workspace"
    )


@dataclass
class ProcessingConfig:
    """Configuration for batch processing of several media packages."""

    workers: int = 1
    """Number of media packages processed in parallel (1 = sequential)."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")


@dataclass
class TrackSelectConfig:
    """Complete trackselect configuration."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    compute: ComputeConfig = field(default_factory=ComputeConfig)
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
