"""Composition engine for select-tracks.

Decides for every input track whether it is muxed, stripped of its audio,
cloned or dropped, and produces the final set of output tracks.

Two branches exist:

- All tracks show their video: every track survives. The audio muxing
  mode decides where audio ends up (duplicated onto every track, forced
  onto one target track, or left in place with hidden audio stripped).
- Otherwise exactly one track is expected to show video. It survives,
  combined with the visible audio of another track if there is one.

Surviving tracks are always new elements of the media package, so the
final flavor and tag rewrite never touches an ingested track.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from trackselect.domain.enums import AudioMuxing, SubStream
from trackselect.domain.models import MediaPackage, Track
from trackselect.selection.classifier import (
    SlotState,
    TrackSlot,
    all_non_hidden,
    find_non_hidden,
    find_single_audio_slot,
    find_slot_by_flavor_type,
)
from trackselect.selection.dispatcher import JobDispatcher
from trackselect.selection.exceptions import CompositionError, ConfigurationError
from trackselect.selection.options import AUDIO_MUXING

logger = logging.getLogger(__name__)


@dataclass
class CompositionResult:
    """Outcome of a composition run."""

    tracks: list[Track] = field(default_factory=list)
    """Surviving output tracks, in input order."""

    queue_time_ms: int = 0
    """Sum of the queue times of all jobs."""

    job_count: int = 0


class _Composition:
    """State of a single composition run over one media package."""

    def __init__(self, dispatcher: JobDispatcher, mediapackage: MediaPackage) -> None:
        self.dispatcher = dispatcher
        self.mediapackage = mediapackage
        self.queue_time_ms = 0
        self.job_count = 0

    def mux(self, slot: TrackSlot, video: Track, audio: Track) -> None:
        result = self.dispatcher.mux(video, audio, self.mediapackage)
        slot.compose(result.track)
        self.queue_time_ms += result.queue_time_ms
        self.job_count += 1

    def hide_audio(self, slot: TrackSlot) -> None:
        result = self.dispatcher.hide_audio(slot.track, self.mediapackage)
        slot.compose(result.track)
        self.queue_time_ms += result.queue_time_ms
        self.job_count += 1

    def clone(self, slot: TrackSlot) -> None:
        clone = slot.track.clone()
        clone.identifier = None
        self.mediapackage.add(clone)
        logger.debug("Cloned %s as %s", slot.track, clone.identifier)
        slot.compose(clone)


class CompositionEngine:
    """Runs the track composition for a media package."""

    def __init__(self, dispatcher: JobDispatcher) -> None:
        self._dispatcher = dispatcher

    def compose(
        self,
        mediapackage: MediaPackage,
        slots: Sequence[TrackSlot],
        audio_muxing: AudioMuxing = AudioMuxing.NONE,
        force_target: str = "presenter",
    ) -> CompositionResult:
        """Compose the output tracks for the given slots.

        Args:
            mediapackage: Package receiving every produced track.
            slots: Working set, one slot per source track.
            audio_muxing: Audio muxing mode for the all-video branch.
            force_target: Flavor type receiving the audio in FORCE mode.

        Returns:
            CompositionResult with the surviving tracks and queue time.

        Raises:
            ConfigurationError: If FORCE mode names a missing target.
            CompositionError: If no track shows its video.
            JobFailedError: If a compute job fails.
        """
        run = _Composition(self._dispatcher, mediapackage)

        if all_non_hidden(slots, SubStream.VIDEO):
            survivors = self._compose_all_video(run, slots, audio_muxing, force_target)
        else:
            survivors = self._compose_single_video(run, slots)

        for slot in survivors:
            if slot.state is SlotState.PENDING:
                run.clone(slot)

        logger.info(
            "Composed %d track(s) with %d job(s), queue time %d ms",
            len(survivors),
            run.job_count,
            run.queue_time_ms,
        )
        return CompositionResult(
            tracks=[slot.track for slot in survivors],
            queue_time_ms=run.queue_time_ms,
            job_count=run.job_count,
        )

    def _compose_all_video(
        self,
        run: _Composition,
        slots: Sequence[TrackSlot],
        audio_muxing: AudioMuxing,
        force_target: str,
    ) -> list[TrackSlot]:
        single_audio = find_single_audio_slot(slots)

        if audio_muxing is AudioMuxing.DUPLICATE and single_audio is not None:
            logger.info("Duplicating audio of %s to all tracks", single_audio.track)
            for slot in slots:
                if not slot.is_same(single_audio):
                    run.mux(slot, slot.track, single_audio.track)

        elif audio_muxing is AudioMuxing.FORCE and single_audio is not None:
            target = find_slot_by_flavor_type(slots, force_target)
            if target is None:
                raise ConfigurationError(
                    f'"{AUDIO_MUXING}" set to "{AudioMuxing.FORCE.value}", '
                    f'but target flavor "{force_target}" not found!',
                    key=AUDIO_MUXING,
                )
            if not target.is_same(single_audio):
                logger.info(
                    "Moving audio of %s to %s", single_audio.track, target.track
                )
                run.mux(target, target.track, single_audio.track)
                run.hide_audio(single_audio)

        else:
            for slot in slots:
                if slot.has(SubStream.AUDIO) and slot.hide_audio:
                    run.hide_audio(slot)
                else:
                    run.clone(slot)

        return list(slots)

    def _compose_single_video(
        self, run: _Composition, slots: Sequence[TrackSlot]
    ) -> list[TrackSlot]:
        video = find_non_hidden(slots, SubStream.VIDEO)
        if video is None:
            raise CompositionError("couldn't find a stream with non-hidden video")
        # At most one other track with visible audio is expected
        audio = find_non_hidden(slots, SubStream.AUDIO)
        audio_is_own = audio is None or audio.is_same(video)

        if video.has(SubStream.AUDIO) and video.hide_audio and audio_is_own:
            run.hide_audio(video)
        elif audio_is_own:
            run.clone(video)
        else:
            run.mux(video, video.track, audio.track)

        dropped = len(slots) - 1
        if dropped:
            logger.info("Keeping %s, dropping %d other track(s)", video.track, dropped)
        return [video]
