"""Final flavor and tag rewriting of the surviving tracks."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from trackselect.domain.models import Flavor, Track
from trackselect.selection.tags import TagDiff

logger = logging.getLogger(__name__)


def rewrite_flavor(track: Track, target_subtype: str) -> None:
    """Replace the flavor subtype of a track, keeping its type."""
    if track.flavor is None:
        raise ValueError(f"Cannot rewrite flavor of {track}: track has no flavor")
    track.flavor = track.flavor.with_subtype(target_subtype)


def rewrite_tracks(
    tracks: Iterable[Track],
    target_flavor: Flavor,
    target_tags: str | None = None,
) -> None:
    """Apply the target subtype and optional tag diff to every track."""
    tag_diff = TagDiff.parse(target_tags) if target_tags else None
    for track in tracks:
        rewrite_flavor(track, target_flavor.subtype)
        if tag_diff is not None:
            tag_diff.apply(track)
        logger.debug("Finalized %s with tags %s", track, sorted(track.tags))
