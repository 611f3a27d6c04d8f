"""Environment variable reader with dependency injection support.

Reads TRACKSELECT_* settings with type conversion. Tests inject a plain
mapping instead of touching os.environ.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})


class EnvReader:
    """Typed access to environment variables.

    Example:
        reader = EnvReader(env={"TRACKSELECT_COMPUTE_TIMEOUT": "60"})
        reader.get_float("TRACKSELECT_COMPUTE_TIMEOUT", 30.0)  # 60.0
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def get_str(self, var: str, default: str | None = None) -> str | None:
        """Return the raw value, or default if unset."""
        value = self._env.get(var)
        return default if value is None else value

    def get_int(self, var: str, default: int | None = None) -> int | None:
        """Return the value parsed as int; default if unset or invalid."""
        value = self._env.get(var)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid integer value for %s: %s", var, value)
            return default

    def get_float(self, var: str, default: float | None = None) -> float | None:
        """Return the value parsed as float; default if unset or invalid."""
        value = self._env.get(var)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            logger.warning("Invalid float value for %s: %s", var, value)
            return default

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Return the value as bool ("true", "1", "yes", "on" are true)."""
        value = self._env.get(var)
        if value is None:
            return default
        return value.strip().lower() in _TRUE_VALUES

    def get_path(self, var: str, default: Path | None = None) -> Path | None:
        """Return the value as an expanded Path, or default if unset."""
        value = self._env.get(var)
        if not value:
            return default
        return Path(value).expanduser()
