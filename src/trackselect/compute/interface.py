"""Compute service protocol and job types.

The compute (composer) service runs mux and encode jobs remotely. This
module defines the types exchanged with it and the protocol every
implementation follows.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from trackselect.domain.models import Track

# Encoding profile identifiers known to the compute service
MUX_AV_PROFILE = "mux-av.work"
VIDEO_ONLY_PROFILE = "video-only.work"


class JobStatus(Enum):
    """Status of a remote compute job."""

    QUEUED = "queued"
    RUNNING = "running"
    FINISHED = "finished"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """True if the job will not change status any more."""
        return self in (JobStatus.FINISHED, JobStatus.FAILED, JobStatus.CANCELLED)


@dataclass(frozen=True)
class Job:
    """Handle to a remote compute job."""

    id: str
    status: JobStatus
    payload: str | None = None
    """Serialized result track (JSON), set when the job finished."""

    queue_time_ms: int = 0
    """Time the job waited in the queue before it started."""

    @property
    def is_success(self) -> bool:
        """True if the job finished successfully."""
        return self.status == JobStatus.FINISHED


@dataclass(frozen=True)
class EncodingProfile:
    """Named transcode recipe known to the compute service."""

    identifier: str
    name: str | None = None


class ComputeService(Protocol):
    """Protocol for compute service implementations.

    Implementations must be safe for concurrent use from several threads.
    """

    def get_profile(self, identifier: str) -> EncodingProfile | None:
        """Look up an encoding profile, returning None if it is unknown."""
        ...

    def mux(self, video: Track, audio: Track, profile_id: str) -> Job:
        """Submit a job muxing the video of one track with the audio of another."""
        ...

    def encode(self, track: Track, profile_id: str) -> Job:
        """Submit a job encoding a single track with the given profile."""
        ...

    def wait_for_job(self, job: Job) -> Job:
        """Block until the job reaches a terminal status and return it."""
        ...
