"""Domain models for trackselect.

These models describe media packages and the tracks they contain,
independent of how packages are stored or transported.
"""

from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field

WILDCARD = "*"


@dataclass(frozen=True)
class Flavor:
    """Two-part classification of a media element, e.g. presenter/source."""

    type: str
    subtype: str

    @classmethod
    def parse(cls, value: str) -> Flavor:
        """Parse a flavor from its "type/subtype" string form.

        Args:
            value: Flavor string such as "presenter/work" or "*/source".

        Returns:
            Parsed Flavor.

        Raises:
            ValueError: If the string is not of the form "type/subtype".
        """
        text = value.strip()
        type_, sep, subtype = text.partition("/")
        type_ = type_.strip()
        subtype = subtype.strip()
        if not sep or not type_ or not subtype or "/" in subtype:
            raise ValueError(f"Invalid flavor '{value}': expected 'type/subtype'")
        return cls(type_, subtype)

    def with_subtype(self, subtype: str) -> Flavor:
        """Return a copy of this flavor with a different subtype."""
        return Flavor(self.type, subtype)

    def matches(self, other: Flavor) -> bool:
        """Check whether two flavors match, honoring "*" wildcards."""
        type_ok = WILDCARD in (self.type, other.type) or self.type == other.type
        subtype_ok = (
            WILDCARD in (self.subtype, other.subtype) or self.subtype == other.subtype
        )
        return type_ok and subtype_ok

    def __str__(self) -> str:
        return f"{self.type}/{self.subtype}"


@dataclass
class Track:
    """A media track (audio and/or video stream) inside a media package."""

    flavor: Flavor | None
    uri: str
    has_audio: bool = False
    has_video: bool = False
    # Assigned when the track is added to a media package
    identifier: str | None = None
    tags: set[str] = field(default_factory=set)
    mimetype: str | None = None
    duration_ms: int | None = None

    @property
    def flavor_type(self) -> str | None:
        """Return the flavor type, or None if the track has no flavor."""
        return self.flavor.type if self.flavor is not None else None

    def clone(self) -> Track:
        """Return an independent copy of this track."""
        return copy.deepcopy(self)

    def __str__(self) -> str:
        return f"track {self.identifier} ({self.flavor}, {self.uri})"


@dataclass
class MediaPackage:
    """Mutable container of the tracks belonging to one media item."""

    identifier: str
    tracks: list[Track] = field(default_factory=list)
    title: str | None = None

    def get_tracks_by_flavor(self, flavor: Flavor) -> list[Track]:
        """Return tracks whose flavor matches the given (wildcard) flavor."""
        return [
            t for t in self.tracks if t.flavor is not None and flavor.matches(t.flavor)
        ]

    def get_track(self, identifier: str) -> Track | None:
        """Return the track with the given identifier, or None."""
        return next((t for t in self.tracks if t.identifier == identifier), None)

    def add(self, track: Track) -> Track:
        """Add a track, assigning a fresh identifier if it has none.

        Args:
            track: Track to add.

        Returns:
            The added track (same instance).
        """
        if track.identifier is None:
            track.identifier = str(uuid.uuid4())
        self.tracks.append(track)
        return track
