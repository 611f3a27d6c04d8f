"""Domain models and enums for trackselect.

This package contains core domain types that are independent of the
compute service and storage layers:

- Domain models: Flavor, Track, MediaPackage
- Domain enums: SubStream, AudioMuxing
- Manifest serialization helpers

Usage:
    from trackselect.domain import Flavor, MediaPackage, Track
    from trackselect.domain import AudioMuxing, SubStream
"""

from .enums import AudioMuxing, SubStream
from .models import Flavor, MediaPackage, Track
from .serialization import (
    ManifestError,
    load_manifest,
    save_manifest,
    track_from_json,
    track_to_json,
)

__all__ = [
    # Models
    "Flavor",
    "MediaPackage",
    "Track",
    # Enums
    "AudioMuxing",
    "SubStream",
    # Serialization
    "ManifestError",
    "load_manifest",
    "save_manifest",
    "track_from_json",
    "track_to_json",
]
