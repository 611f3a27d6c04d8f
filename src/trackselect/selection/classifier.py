"""Track classification for the composition engine.

Each input track gets a TrackSlot carrying its resolved hide flags. Slots
are identified by a stable index, so "the same track" is always an index
comparison and never a comparison of track contents.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from trackselect.domain.enums import SubStream
from trackselect.domain.models import Track
from trackselect.selection.exceptions import CompositionError
from trackselect.selection.hide_policy import resolve_hidden


class SlotState(Enum):
    """Lifecycle of a working-set slot."""

    PENDING = "pending"  # Still holds the ingested source track
    COMPOSED = "composed"  # Holds a freshly produced or cloned track


@dataclass(eq=False)
class TrackSlot:
    """One input track plus its hide flags for this invocation.

    The hide flags are fixed at creation. The slot moves from PENDING to
    COMPOSED exactly once, when its output track is produced.
    """

    index: int
    source: Track
    hide_audio: bool
    hide_video: bool
    composed: Track | None = None

    @property
    def state(self) -> SlotState:
        return SlotState.PENDING if self.composed is None else SlotState.COMPOSED

    @property
    def track(self) -> Track:
        """The current track: the composed one if present, else the source."""
        return self.composed if self.composed is not None else self.source

    @property
    def flavor_type(self) -> str | None:
        return self.track.flavor_type

    def has(self, sub_stream: SubStream) -> bool:
        """True if the current track carries the sub-stream."""
        if sub_stream is SubStream.AUDIO:
            return self.track.has_audio
        return self.track.has_video

    def hides(self, sub_stream: SubStream) -> bool:
        """True if configuration hides the sub-stream for this track."""
        if sub_stream is SubStream.AUDIO:
            return self.hide_audio
        return self.hide_video

    def shows(self, sub_stream: SubStream) -> bool:
        """True if the track has the sub-stream and it is not hidden."""
        return self.has(sub_stream) and not self.hides(sub_stream)

    def compose(self, track: Track) -> None:
        """Record the output track of this slot (PENDING -> COMPOSED).

        Raises:
            CompositionError: If the slot was already composed.
        """
        if self.composed is not None:
            raise CompositionError(
                f"Slot {self.index} ({self.source}) was already composed"
            )
        self.composed = track

    def is_same(self, other: TrackSlot | None) -> bool:
        """True if other is this very slot."""
        return other is not None and other.index == self.index


def build_slots(
    tracks: Sequence[Track], configuration: Mapping[str, str]
) -> list[TrackSlot]:
    """Create one slot per track with hide flags resolved from configuration."""
    return [
        TrackSlot(
            index=i,
            source=track,
            hide_audio=resolve_hidden(
                configuration, track.flavor_type, SubStream.AUDIO
            ),
            hide_video=resolve_hidden(
                configuration, track.flavor_type, SubStream.VIDEO
            ),
        )
        for i, track in enumerate(tracks)
    ]


def all_non_hidden(slots: Iterable[TrackSlot], sub_stream: SubStream) -> bool:
    """True if every slot has the sub-stream and does not hide it."""
    return all(slot.shows(sub_stream) for slot in slots)


def find_non_hidden(
    slots: Iterable[TrackSlot], sub_stream: SubStream
) -> TrackSlot | None:
    """Return the first slot that has and shows the sub-stream."""
    return next((slot for slot in slots if slot.shows(sub_stream)), None)


def find_single_audio_slot(slots: Iterable[TrackSlot]) -> TrackSlot | None:
    """Return the only slot with visible audio.

    Returns None when no slot or more than one slot has visible audio.
    """
    result: TrackSlot | None = None
    for slot in slots:
        if slot.shows(SubStream.AUDIO):
            if result is not None:
                return None
            result = slot
    return result


def find_slot_by_flavor_type(
    slots: Iterable[TrackSlot], flavor_type: str
) -> TrackSlot | None:
    """Return the first slot whose track has the given flavor type."""
    return next((slot for slot in slots if slot.flavor_type == flavor_type), None)
