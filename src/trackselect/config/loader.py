"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (TRACKSELECT_*)
3. Config file (~/.trackselect/config.toml)
4. Default values

Environment variables:
- TRACKSELECT_CONFIG_PATH: Path to config file (overrides default location)
- TRACKSELECT_DATA_DIR: Path to data directory (overrides ~/.trackselect/)
- TRACKSELECT_COMPUTE_URL: Base URL of the compute service
- TRACKSELECT_COMPUTE_TIMEOUT: HTTP timeout in seconds
- TRACKSELECT_POLL_INTERVAL: Seconds between job status polls
- TRACKSELECT_MAX_WAIT: Maximum seconds to wait for a single job
- TRACKSELECT_WORKSPACE_ROOT: Workspace root directory
- TRACKSELECT_LOG_LEVEL: Log level
- TRACKSELECT_WORKERS: Parallel media packages for batch runs
"""

from __future__ import annotations

import logging
import os
import threading
import tomllib
from pathlib import Path
from typing import Any

from trackselect.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from trackselect.config.env import EnvReader
from trackselect.config.models import TrackSelectConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".trackselect"
CONFIG_FILE_NAME = "config.toml"

# path -> (parsed dict, mtime)
_config_cache: dict[Path, tuple[dict, float]] = {}
_config_cache_lock = threading.Lock()


class TomlParseError(Exception):
    """Raised when the config file is not valid TOML."""


def get_data_dir() -> Path:
    """Get the trackselect data directory (TRACKSELECT_DATA_DIR or ~/.trackselect)."""
    env_path = os.environ.get("TRACKSELECT_DATA_DIR")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_DIR


def get_default_config_path() -> Path:
    """Get the config file path.

    TRACKSELECT_CONFIG_PATH wins; otherwise config.toml in the data directory.
    """
    env_path = os.environ.get("TRACKSELECT_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return get_data_dir() / CONFIG_FILE_NAME


def load_toml_file(path: Path, *, strict: bool = False) -> dict[str, Any]:
    """Read and parse a TOML file.

    Args:
        path: File to read.
        strict: Raise TomlParseError instead of returning {} on bad content.

    Returns:
        Parsed dict, or {} when the file is missing (or invalid and not strict).
    """
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        if strict:
            raise TomlParseError(f"Cannot parse config file {path}: {e}") from e
        logger.warning("Ignoring unreadable config file %s: %s", path, e)
        return {}


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict:
    """Load the config file, cached with mtime-based invalidation.

    Thread-safe.

    Args:
        path: Path to config file. If None, uses default location.
        strict: If True, raise TomlParseError on parse failures.

    Returns:
        Parsed configuration dict. Empty dict if file doesn't exist.
    """
    if path is None:
        path = get_default_config_path()

    try:
        current_mtime = path.stat().st_mtime
    except FileNotFoundError:
        current_mtime = 0.0

    with _config_cache_lock:
        cached = _config_cache.get(path)
        if cached is not None and cached[1] == current_mtime:
            return cached[0]

        result = load_toml_file(path, strict=strict)
        _config_cache[path] = (result, current_mtime)
        return result


def clear_config_cache() -> None:
    """Clear the config file cache. Primarily useful for testing."""
    with _config_cache_lock:
        _config_cache.clear()


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    compute_url: str | None = None,
    workspace_root: Path | None = None,
    workers: int | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> TrackSelectConfig:
    """Get trackselect configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides TRACKSELECT_CONFIG_PATH).
        compute_url: CLI override for the compute service URL.
        workspace_root: CLI override for the workspace root.
        workers: CLI override for parallel workers.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise TomlParseError on config file parse failures.

    Returns:
        TrackSelectConfig with merged configuration.
    """
    reader = env_reader or EnvReader()
    file_config = load_config_file(config_path, strict=strict)

    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config), source_name="file")
    builder.apply(source_from_env(reader), source_name="env")
    builder.apply(
        ConfigSource(
            compute_url=compute_url,
            workspace_root=workspace_root,
            processing_workers=workers,
        ),
        source_name="cli",
    )
    return builder.build()
