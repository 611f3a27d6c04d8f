"""Exceptions raised by compute service clients."""


class ComputeServiceError(Exception):
    """Raised when the compute service cannot be reached or answers badly."""


class JobTimeoutError(ComputeServiceError):
    """Raised when a job does not reach a terminal status in time.

    Attributes:
        job_id: The ID of the job that was being waited on.
        waited_seconds: How long the client waited.
    """

    def __init__(self, job_id: str, waited_seconds: float) -> None:
        self.job_id = job_id
        self.waited_seconds = waited_seconds
        super().__init__(
            f"Job {job_id} did not finish within {waited_seconds:.1f} seconds"
        )
