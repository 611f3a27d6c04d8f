"""JSON (de)serialization of tracks and media package manifests.

Track descriptors travel as JSON in compute job payloads, and media
packages are stored on disk as JSON manifests.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from trackselect.domain.models import Flavor, MediaPackage, Track

logger = logging.getLogger(__name__)


class ManifestError(Exception):
    """Raised when a track descriptor or manifest cannot be (de)serialized."""


def track_to_dict(track: Track) -> dict[str, Any]:
    """Convert a track to a JSON-compatible dictionary."""
    data: dict[str, Any] = {
        "id": track.identifier,
        "flavor": str(track.flavor) if track.flavor is not None else None,
        "uri": track.uri,
        "audio": track.has_audio,
        "video": track.has_video,
        "tags": sorted(track.tags),
    }
    if track.mimetype is not None:
        data["mimetype"] = track.mimetype
    if track.duration_ms is not None:
        data["duration"] = track.duration_ms
    return data


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ManifestError(
            f"Track '{key}' must be a string, got {type(value).__name__}"
        )
    return value


def track_from_dict(data: dict[str, Any]) -> Track:
    """Build a track from its dictionary form.

    Raises:
        ManifestError: If required fields are missing or malformed.
    """
    if not isinstance(data, dict):
        raise ManifestError(f"Track descriptor must be an object, got {type(data)}")
    uri = _optional_str(data, "uri")
    if not uri:
        raise ManifestError("Track descriptor is missing 'uri'")

    flavor = None
    flavor_value = _optional_str(data, "flavor")
    if flavor_value:
        try:
            flavor = Flavor.parse(flavor_value)
        except ValueError as e:
            raise ManifestError(str(e)) from e

    tags = data.get("tags") or []
    if not isinstance(tags, list):
        raise ManifestError("Track 'tags' must be a list")

    duration = data.get("duration")
    # bool is an int subclass
    if duration is not None and (
        isinstance(duration, bool) or not isinstance(duration, int)
    ):
        raise ManifestError(
            f"Track 'duration' must be an integer, got {type(duration).__name__}"
        )

    return Track(
        flavor=flavor,
        uri=uri,
        has_audio=bool(data.get("audio", False)),
        has_video=bool(data.get("video", False)),
        identifier=_optional_str(data, "id") or None,
        tags={str(t) for t in tags},
        mimetype=_optional_str(data, "mimetype"),
        duration_ms=duration,
    )


def track_to_json(track: Track) -> str:
    """Serialize a track descriptor to a JSON string."""
    return json.dumps(track_to_dict(track))


def track_from_json(payload: str) -> Track:
    """Deserialize a track descriptor from a JSON string.

    Raises:
        ManifestError: If the payload is not a valid track descriptor.
    """
    try:
        data = json.loads(payload)
    except (TypeError, json.JSONDecodeError) as e:
        raise ManifestError(f"Invalid track payload: {e}") from e
    return track_from_dict(data)


def mediapackage_to_dict(mediapackage: MediaPackage) -> dict[str, Any]:
    """Convert a media package to a JSON-compatible dictionary."""
    data: dict[str, Any] = {
        "id": mediapackage.identifier,
        "tracks": [track_to_dict(t) for t in mediapackage.tracks],
    }
    if mediapackage.title is not None:
        data["title"] = mediapackage.title
    return data


def mediapackage_from_dict(data: dict[str, Any]) -> MediaPackage:
    """Build a media package from its dictionary form.

    Raises:
        ManifestError: If the manifest is malformed.
    """
    if not isinstance(data, dict):
        raise ManifestError("Manifest must be a JSON object")
    identifier = data.get("id")
    if not identifier:
        raise ManifestError("Manifest is missing 'id'")
    tracks = data.get("tracks") or []
    if not isinstance(tracks, list):
        raise ManifestError("Manifest 'tracks' must be a list")
    return MediaPackage(
        identifier=str(identifier),
        tracks=[track_from_dict(t) for t in tracks],
        title=data.get("title"),
    )


def load_manifest(path: Path) -> MediaPackage:
    """Load a media package manifest from a JSON file.

    Raises:
        ManifestError: If the file cannot be read or parsed.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ManifestError(f"Cannot read manifest {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid JSON in manifest {path}: {e}") from e
    return mediapackage_from_dict(data)


def save_manifest(mediapackage: MediaPackage, path: Path) -> None:
    """Write a media package manifest to a JSON file.

    Raises:
        ManifestError: If the file cannot be written.
    """
    content = json.dumps(mediapackage_to_dict(mediapackage), indent=2)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content + "\n", encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Cannot write manifest {path}: {e}") from e
    logger.debug("Wrote manifest for %s to %s", mediapackage.identifier, path)
