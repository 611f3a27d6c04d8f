"""Exceptions for the select-tracks operation.

Every failure of the operation is fatal for the media package being
processed; the hierarchy lets callers tell configuration mistakes apart
from remote job failures and I/O problems.
"""


class SelectTracksError(Exception):
    """Base class for select-tracks errors."""


class ConfigurationError(SelectTracksError):
    """Raised for invalid or missing operation configuration.

    Attributes:
        key: Configuration key at fault, if known.
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        self.key = key
        super().__init__(message)


class JobFailedError(SelectTracksError):
    """Raised when a mux or encode job does not finish successfully.

    Attributes:
        job_id: Identifier of the failed job, if one was created.
        tracks: Descriptions of the source tracks involved.
    """

    def __init__(
        self, message: str, job_id: str | None = None, tracks: tuple[str, ...] = ()
    ) -> None:
        self.job_id = job_id
        self.tracks = tracks
        super().__init__(message)


class CompositionError(SelectTracksError):
    """Raised when the input tracks violate the composition preconditions."""


class OperationError(SelectTracksError):
    """Raised for I/O or transport failures while running the operation."""
