"""HTTP client for the remote compute service.

Submits mux/encode jobs, resolves encoding profiles and polls jobs until
they reach a terminal status.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

import httpx

from trackselect.compute.exceptions import ComputeServiceError, JobTimeoutError
from trackselect.compute.interface import EncodingProfile, Job, JobStatus
from trackselect.config.models import ComputeConfig
from trackselect.domain.models import Track
from trackselect.domain.serialization import track_to_dict

logger = logging.getLogger(__name__)


class RemoteComputeService:
    """Compute service implementation backed by a REST API.

    The underlying httpx.Client is created lazily and shared between
    threads, so one instance can serve concurrent invocations.
    """

    def __init__(
        self,
        config: ComputeConfig,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the client.

        Args:
            config: Compute connection configuration (url is required).
            sleep: Sleep function used between polls (injectable for tests).
            clock: Monotonic clock used for max_wait_seconds.

        Raises:
            ValueError: If no URL is configured.
        """
        if not config.url:
            raise ValueError("Compute service URL is not configured")
        self._base_url = config.url.rstrip("/")
        self._timeout = config.timeout_seconds
        self._poll_interval = config.poll_interval
        self._max_wait = config.max_wait_seconds
        self._sleep = sleep
        self._clock = clock
        self._client: httpx.Client | None = None
        self._client_lock = threading.Lock()

    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        with self._client_lock:
            if self._client is None:
                self._client = httpx.Client(
                    base_url=self._base_url,
                    timeout=self._timeout,
                    headers={"Accept": "application/json"},
                )
            return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def __enter__(self) -> RemoteComputeService:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def get_profile(self, identifier: str) -> EncodingProfile | None:
        """Look up an encoding profile.

        Returns:
            The profile, or None if the service does not know it (404).

        Raises:
            ComputeServiceError: On transport or HTTP errors.
        """
        client = self._get_client()
        try:
            response = client.get(f"/profiles/{identifier}")
            if response.status_code == 404:
                return None
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise ComputeServiceError(
                f"Failed to look up profile {identifier}: {e}"
            ) from e
        return EncodingProfile(
            identifier=data.get("identifier", identifier),
            name=data.get("name"),
        )

    def mux(self, video: Track, audio: Track, profile_id: str) -> Job:
        """Submit a mux job combining video and audio tracks."""
        body = {
            "videoTrack": track_to_dict(video),
            "audioTrack": track_to_dict(audio),
            "profileId": profile_id,
        }
        job = self._submit("/mux", body)
        logger.debug("Submitted mux job %s (%s + %s)", job.id, video, audio)
        return job

    def encode(self, track: Track, profile_id: str) -> Job:
        """Submit an encode job for a single track."""
        body = {"track": track_to_dict(track), "profileId": profile_id}
        job = self._submit("/encode", body)
        logger.debug("Submitted encode job %s for %s", job.id, track)
        return job

    def get_job(self, job_id: str) -> Job:
        """Fetch the current state of a job.

        Raises:
            ComputeServiceError: On transport or HTTP errors.
        """
        client = self._get_client()
        try:
            response = client.get(f"/jobs/{job_id}")
            response.raise_for_status()
            return self._parse_job(response.json())
        except httpx.HTTPError as e:
            raise ComputeServiceError(f"Failed to get job {job_id}: {e}") from e

    def wait_for_job(self, job: Job) -> Job:
        """Poll a job until it reaches a terminal status.

        Raises:
            JobTimeoutError: If max_wait_seconds is configured and exceeded.
            ComputeServiceError: On transport or HTTP errors.
        """
        started = self._clock()
        current = job
        while not current.status.is_terminal:
            waited = self._clock() - started
            if self._max_wait is not None and waited >= self._max_wait:
                raise JobTimeoutError(job.id, waited)
            self._sleep(self._poll_interval)
            current = self.get_job(job.id)
        logger.debug("Job %s reached status %s", current.id, current.status.value)
        return current

    def _submit(self, path: str, body: dict[str, Any]) -> Job:
        client = self._get_client()
        try:
            response = client.post(path, json=body)
            response.raise_for_status()
            return self._parse_job(response.json())
        except httpx.HTTPError as e:
            raise ComputeServiceError(f"Failed to submit job to {path}: {e}") from e

    @staticmethod
    def _parse_job(data: dict[str, Any]) -> Job:
        """Parse a job JSON object.

        Raises:
            ComputeServiceError: If the object is not a valid job.
        """
        try:
            return Job(
                id=str(data["id"]),
                status=JobStatus(data["status"]),
                payload=data.get("payload"),
                queue_time_ms=int(data.get("queueTime") or 0),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ComputeServiceError(f"Malformed job response: {data!r}") from e
