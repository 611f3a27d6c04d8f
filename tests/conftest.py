"""Shared test fixtures for trackselect."""

from __future__ import annotations

import dataclasses
import threading
from collections.abc import Callable
from pathlib import Path

import pytest

from trackselect.compute.interface import (
    MUX_AV_PROFILE,
    VIDEO_ONLY_PROFILE,
    EncodingProfile,
    Job,
    JobStatus,
)
from trackselect.config.loader import clear_config_cache
from trackselect.domain.models import Flavor, MediaPackage, Track
from trackselect.domain.serialization import track_to_json
from trackselect.workspace.local import LocalWorkspace


class FakeComputeService:
    """In-memory compute service.

    Every job writes a small output file into a scratch directory and
    returns a track descriptor pointing at it. Produced tracks carry no
    flavor, like the tracks a real composer hands back.

    Attributes:
        calls: Submitted jobs as ("mux", video_id, audio_id) or
            ("encode", track_id) tuples, in submission order.
        profiles: Known encoding profile identifiers.
        fail_operations: Operations ("mux", "encode") whose jobs fail.
        queue_time_ms: Queue time reported for every job.
    """

    def __init__(self, scratch: Path, queue_time_ms: int = 10) -> None:
        self.scratch = scratch
        self.calls: list[tuple[str, ...]] = []
        self.profiles = {MUX_AV_PROFILE, VIDEO_ONLY_PROFILE}
        self.fail_operations: set[str] = set()
        self.queue_time_ms = queue_time_ms
        self._operations: dict[str, str] = {}
        self._counter = 0
        self._lock = threading.Lock()

    def get_profile(self, identifier: str) -> EncodingProfile | None:
        if identifier not in self.profiles:
            return None
        return EncodingProfile(identifier=identifier, name=identifier)

    def mux(self, video: Track, audio: Track, profile_id: str) -> Job:
        produced = Track(flavor=None, uri="", has_audio=True, has_video=True)
        return self._submit("mux", (video.identifier, audio.identifier), produced)

    def encode(self, track: Track, profile_id: str) -> Job:
        produced = Track(flavor=None, uri="", has_audio=False, has_video=True)
        return self._submit("encode", (track.identifier,), produced)

    def wait_for_job(self, job: Job) -> Job:
        operation = self._operations[job.id]
        if operation in self.fail_operations:
            return dataclasses.replace(job, status=JobStatus.FAILED, payload=None)
        return dataclasses.replace(job, status=JobStatus.FINISHED)

    def _submit(self, operation: str, sources: tuple, produced: Track) -> Job:
        with self._lock:
            self._counter += 1
            job_id = f"job-{self._counter}"
            self.calls.append((operation, *sources))
            self._operations[job_id] = operation

        self.scratch.mkdir(parents=True, exist_ok=True)
        output = self.scratch / f"{job_id}.mp4"
        output.write_bytes(b"media")
        produced.uri = output.as_uri()

        return Job(
            id=job_id,
            status=JobStatus.QUEUED,
            payload=track_to_json(produced),
            queue_time_ms=self.queue_time_ms,
        )


@pytest.fixture
def compute(tmp_path: Path) -> FakeComputeService:
    """Return an in-memory compute service writing into tmp_path."""
    return FakeComputeService(tmp_path / "scratch")


@pytest.fixture
def workspace(tmp_path: Path) -> LocalWorkspace:
    """Return a workspace rooted in tmp_path."""
    return LocalWorkspace(tmp_path / "workspace")


@pytest.fixture
def make_track() -> Callable[..., Track]:
    """Factory for ingested source tracks.

    The identifier defaults to "<type>-source" and the URI to
    file:///ingest/<type>.mov.
    """

    def _make(
        flavor: str = "presenter/source",
        *,
        audio: bool = True,
        video: bool = True,
        identifier: str | None = None,
        tags: tuple[str, ...] = ("archive",),
    ) -> Track:
        parsed = Flavor.parse(flavor)
        return Track(
            flavor=parsed,
            uri=f"file:///ingest/{parsed.type}.mov",
            has_audio=audio,
            has_video=video,
            identifier=identifier or f"{parsed.type}-source",
            tags=set(tags),
        )

    return _make


@pytest.fixture
def make_mediapackage() -> Callable[..., MediaPackage]:
    """Factory for media packages holding the given tracks."""

    def _make(*tracks: Track, identifier: str = "mp-1") -> MediaPackage:
        return MediaPackage(identifier=identifier, tracks=list(tracks))

    return _make


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep tests away from the user's config file and environment."""
    for var in (
        "TRACKSELECT_CONFIG_PATH",
        "TRACKSELECT_COMPUTE_URL",
        "TRACKSELECT_COMPUTE_TIMEOUT",
        "TRACKSELECT_POLL_INTERVAL",
        "TRACKSELECT_MAX_WAIT",
        "TRACKSELECT_WORKSPACE_ROOT",
        "TRACKSELECT_LOG_LEVEL",
        "TRACKSELECT_WORKERS",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("TRACKSELECT_DATA_DIR", str(tmp_path / "data"))
    clear_config_cache()
    yield
    clear_config_cache()
