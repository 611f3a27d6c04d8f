"""Tag diffs for media package elements.

A tag diff is written as a list of tags separated by commas or whitespace:
"+tag" adds a tag, "-tag" removes one and a bare "tag" is part of the
overwrite set. A non-empty overwrite set replaces all existing tags and
the add/remove entries are ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from trackselect.domain.models import Track

_SEPARATOR = re.compile(r"[,\s]+")


@dataclass(frozen=True)
class TagDiff:
    """Parsed tag changes."""

    add: frozenset[str] = frozenset()
    remove: frozenset[str] = frozenset()
    overwrite: frozenset[str] = frozenset()

    @classmethod
    def parse(cls, value: str) -> TagDiff:
        """Parse a tag diff string such as "+engage,-archive"."""
        add: set[str] = set()
        remove: set[str] = set()
        overwrite: set[str] = set()
        for token in _SEPARATOR.split(value.strip()):
            if token.startswith("+"):
                if token[1:]:
                    add.add(token[1:])
            elif token.startswith("-"):
                if token[1:]:
                    remove.add(token[1:])
            elif token:
                overwrite.add(token)
        return cls(frozenset(add), frozenset(remove), frozenset(overwrite))

    def apply(self, track: Track) -> None:
        """Apply the diff to a track's tags in place."""
        if self.overwrite:
            track.tags = set(self.overwrite)
            return
        track.tags -= self.remove
        track.tags |= self.add
