"""Job dispatching for mux and hide-audio operations.

Each request resolves its encoding profile, submits a job to the compute
service and blocks until the job is terminal. A finished job's track is
added to the media package and its file relocated into the workspace.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

from trackselect.compute.exceptions import ComputeServiceError, JobTimeoutError
from trackselect.compute.interface import (
    MUX_AV_PROFILE,
    VIDEO_ONLY_PROFILE,
    ComputeService,
    EncodingProfile,
    Job,
)
from trackselect.domain.models import MediaPackage, Track
from trackselect.domain.serialization import ManifestError, track_from_json
from trackselect.logging.context import job_context
from trackselect.selection.exceptions import (
    ConfigurationError,
    JobFailedError,
    OperationError,
)
from trackselect.workspace.interface import Workspace, WorkspaceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackJobResult:
    """Track produced by a job, and how long the job was queued."""

    track: Track
    queue_time_ms: int


def file_name_from_elements(source: Track, produced: Track) -> str:
    """Name a produced file after its source, keeping the produced extension.

    Example: source ".../lecture.mov", produced ".../job42.mp4" -> "lecture.mp4".
    """
    base = PurePosixPath(unquote(urlparse(source.uri).path)).stem
    extension = PurePosixPath(unquote(urlparse(produced.uri).path)).suffix
    return f"{base}{extension}"


class JobDispatcher:
    """Submits compute jobs for one media package at a time.

    Jobs are strictly sequential: every call blocks until its job is done.
    """

    def __init__(self, compute: ComputeService, workspace: Workspace) -> None:
        self._compute = compute
        self._workspace = workspace

    def get_profile(self, identifier: str) -> EncodingProfile:
        """Resolve an encoding profile.

        Raises:
            ConfigurationError: If the compute service does not know it.
            OperationError: If the compute service cannot be reached.
        """
        try:
            profile = self._compute.get_profile(identifier)
        except ComputeServiceError as e:
            raise OperationError(str(e)) from e
        if profile is None:
            raise ConfigurationError(
                f'couldn\'t find encoding profile "{identifier}"'
            )
        return profile

    def mux(
        self, video: Track, audio: Track, mediapackage: MediaPackage
    ) -> TrackJobResult:
        """Mux the video of one track with the audio of another.

        The produced track takes over the video track's flavor.

        Raises:
            JobFailedError: If the mux job fails.
        """
        profile = self.get_profile(MUX_AV_PROFILE)
        logger.info("Muxing video %s with audio %s", video, audio)
        description = f"Muxing video track {video} and audio track {audio} failed"
        job = self._run(
            lambda: self._compute.mux(video, audio, profile.identifier),
            description,
            (str(video), str(audio)),
        )
        with job_context(job.id):
            return self._process_job(video, mediapackage, job)

    def hide_audio(self, track: Track, mediapackage: MediaPackage) -> TrackJobResult:
        """Rewrap a track into a video-only derivative.

        The produced track takes over the source track's flavor.

        Raises:
            JobFailedError: If the encode job fails.
        """
        profile = self.get_profile(VIDEO_ONLY_PROFILE)
        logger.info("Encoding video only track %s to work version", track)
        description = f"Rewriting container for video track {track} failed"
        job = self._run(
            lambda: self._compute.encode(track, profile.identifier),
            description,
            (str(track),),
        )
        with job_context(job.id):
            return self._process_job(track, mediapackage, job)

    def _run(
        self, submit: Callable[[], Job], description: str, tracks: tuple[str, ...]
    ) -> Job:
        """Submit a job and wait for its terminal status."""
        try:
            job = submit()
            with job_context(job.id):
                logger.debug("Waiting for job %s", job.id)
                job = self._compute.wait_for_job(job)
        except JobTimeoutError as e:
            raise JobFailedError(f"{description}: {e}", e.job_id, tracks) from e
        except ComputeServiceError as e:
            raise OperationError(f"{description}: {e}") from e

        if not job.is_success:
            raise JobFailedError(
                f"{description} (job {job.id} {job.status.value})", job.id, tracks
            )
        return job

    def _process_job(
        self, source: Track, mediapackage: MediaPackage, job: Job
    ) -> TrackJobResult:
        """Take over the track produced by a finished job."""
        if not job.payload:
            raise OperationError(f"Job {job.id} finished without a result track")
        try:
            produced = track_from_json(job.payload)
        except ManifestError as e:
            raise OperationError(f"Job {job.id} returned an invalid track: {e}") from e

        # Adding assigns the identifier the workspace location is keyed on
        mediapackage.add(produced)
        file_name = file_name_from_elements(source, produced)
        try:
            produced.uri = self._workspace.move_to(
                produced.uri, mediapackage.identifier, produced.identifier, file_name
            )
        except WorkspaceError as e:
            raise OperationError(str(e)) from e

        produced.flavor = source.flavor
        logger.info(
            "Job %s produced %s (queued %d ms)",
            job.id,
            produced,
            job.queue_time_ms,
            extra={"queue_time_ms": job.queue_time_ms},
        )
        return TrackJobResult(produced, job.queue_time_ms)
