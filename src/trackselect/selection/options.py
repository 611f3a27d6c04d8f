"""Operation options for select-tracks.

Options arrive as a flat string mapping (workflow operation configuration,
YAML files or -o key=value flags) and are validated with Pydantic before
any job is submitted.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from trackselect.domain.enums import AudioMuxing
from trackselect.domain.models import Flavor
from trackselect.selection.exceptions import ConfigurationError

SOURCE_FLAVOR = "source-flavor"
TARGET_FLAVOR = "target-flavor"
TARGET_TAGS = "target-tags"
AUDIO_MUXING = "audio-muxing"
FORCE_TARGET = "force-target"

FORCE_TARGET_DEFAULT = "presenter"

_OPTION_DESCRIPTIONS: dict[str, str] = {
    SOURCE_FLAVOR: 'The "flavor" of the track to use as a video source input',
    TARGET_FLAVOR: "The flavor to apply to the encoded file",
    TARGET_TAGS: "The tags to apply to the encoded file",
    AUDIO_MUXING: (
        f'Either "{AudioMuxing.NONE.value}", "{AudioMuxing.DUPLICATE.value}" or '
        f'"{AudioMuxing.FORCE.value}" to specially mux audio streams'
    ),
    FORCE_TARGET: (
        f'Target flavor type for the "{AUDIO_MUXING}" option '
        f'"{AudioMuxing.FORCE.value}" (default {FORCE_TARGET_DEFAULT})'
    ),
}


def describe_options() -> dict[str, str]:
    """Return the documented operation options, sorted by key."""
    return dict(sorted(_OPTION_DESCRIPTIONS.items()))


class SelectTracksOptions(BaseModel):
    """Validated select-tracks operation options."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    source_flavor: Flavor = Field(alias=SOURCE_FLAVOR)
    target_flavor: Flavor = Field(alias=TARGET_FLAVOR)
    target_tags: str | None = Field(default=None, alias=TARGET_TAGS)
    audio_muxing: AudioMuxing = Field(default=AudioMuxing.NONE, alias=AUDIO_MUXING)
    force_target: str = Field(default=FORCE_TARGET_DEFAULT, alias=FORCE_TARGET)

    @field_validator("source_flavor", "target_flavor", mode="before")
    @classmethod
    def _parse_flavor(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Flavor.parse(v)
        return v

    @field_validator("audio_muxing", mode="before")
    @classmethod
    def _parse_audio_muxing(cls, v: Any) -> Any:
        if isinstance(v, str):
            return AudioMuxing.from_string(v)
        return v


def _trim_to_none(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = str(value).strip()
    return text or None


def normalize_configuration(raw: Mapping[str, Any]) -> dict[str, str]:
    """Trim values to strings and drop empty ones."""
    result: dict[str, str] = {}
    for key, value in raw.items():
        text = _trim_to_none(value)
        if text is not None:
            result[str(key)] = text
    return result


def _format_validation_error(error: ValidationError) -> tuple[str, str | None]:
    """Turn a Pydantic error into (message, offending key)."""
    errors = error.errors()
    if not errors:
        return f"Invalid operation options: {error}", None
    first = errors[0]
    loc = ".".join(str(x) for x in first.get("loc", []))
    msg = first.get("msg", str(error))
    if first.get("type") == "missing":
        return f"Required option '{loc}' is not set", loc or None
    if loc:
        return f"Invalid option '{loc}': {msg}", loc
    return f"Invalid operation options: {msg}", None


def parse_options(raw: Mapping[str, Any]) -> SelectTracksOptions:
    """Validate operation options.

    Args:
        raw: Option mapping keyed by the documented option names.

    Returns:
        Validated options.

    Raises:
        ConfigurationError: If a required option is missing or a value is invalid.
    """
    try:
        return SelectTracksOptions.model_validate(normalize_configuration(raw))
    except ValidationError as e:
        message, key = _format_validation_error(e)
        raise ConfigurationError(message, key=key) from e


def load_yaml_mapping(path: Path) -> dict[str, str]:
    """Load a flat key/value mapping from a YAML file.

    An empty file yields an empty mapping.

    Raises:
        ConfigurationError: If the file is missing, invalid or not a mapping.
    """
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML syntax in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a YAML mapping")
    return normalize_configuration(data)


def parse_key_values(pairs: tuple[str, ...] | list[str]) -> dict[str, str]:
    """Parse "key=value" strings into a mapping.

    Raises:
        ConfigurationError: If an entry has no "=" or an empty key.
    """
    result: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConfigurationError(f"Expected key=value, got '{pair}'")
        result[key] = value.strip()
    return result
