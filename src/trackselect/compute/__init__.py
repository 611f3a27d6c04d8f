"""Remote compute service access.

Usage:
    from trackselect.compute import RemoteComputeService
    from trackselect.compute import MUX_AV_PROFILE, VIDEO_ONLY_PROFILE
"""

from trackselect.compute.client import RemoteComputeService
from trackselect.compute.exceptions import ComputeServiceError, JobTimeoutError
from trackselect.compute.interface import (
    MUX_AV_PROFILE,
    VIDEO_ONLY_PROFILE,
    ComputeService,
    EncodingProfile,
    Job,
    JobStatus,
)

__all__ = [
    "MUX_AV_PROFILE",
    "VIDEO_ONLY_PROFILE",
    "ComputeService",
    "ComputeServiceError",
    "EncodingProfile",
    "Job",
    "JobStatus",
    "JobTimeoutError",
    "RemoteComputeService",
]
