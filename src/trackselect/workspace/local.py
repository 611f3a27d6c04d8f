"""Filesystem-backed workspace.

Files are laid out as <root>/<mediapackage_id>/<element_id>/<file_name>.
"""

import logging
import shutil
from pathlib import Path
from urllib.parse import unquote, urlparse

from trackselect.workspace.interface import WorkspaceError

logger = logging.getLogger(__name__)


def uri_to_path(uri: str) -> Path:
    """Convert a file:// URI or plain path into a Path.

    Raises:
        WorkspaceError: For URIs with a non-file scheme.
    """
    parsed = urlparse(uri)
    if parsed.scheme in ("", "file"):
        return Path(unquote(parsed.path)) if parsed.scheme else Path(uri)
    raise WorkspaceError(f"Unsupported URI scheme for local workspace: {uri}")


def _check_segment(part: str) -> None:
    """Reject names that would leave their parent directory."""
    if not isinstance(part, str) or part in ("", ".", ".."):
        raise WorkspaceError(f"Invalid workspace path component: {part!r}")
    if "/" in part or "\\" in part:
        raise WorkspaceError(f"Invalid workspace path component: {part!r}")


class LocalWorkspace:
    """Workspace storing files below a local root directory."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def path_for(self, mediapackage_id: str, element_id: str, file_name: str) -> Path:
        """Return the destination path for an element file.

        Raises:
            WorkspaceError: If a component is empty or not a single path segment.
        """
        for part in (mediapackage_id, element_id, file_name):
            _check_segment(part)
        return self.root / mediapackage_id / element_id / file_name

    def move_to(
        self,
        uri: str,
        mediapackage_id: str,
        element_id: str,
        file_name: str,
    ) -> str:
        """Move a file into the workspace and return its new file URI.

        Moving a file onto itself is a no-op.

        Raises:
            WorkspaceError: If the source is missing or the move fails.
        """
        source = uri_to_path(uri)
        destination = self.path_for(mediapackage_id, element_id, file_name)

        if not source.exists():
            raise WorkspaceError(f"Source file not found: {source}")

        if source.resolve() != destination.resolve():
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.move(str(source), str(destination))
            except OSError as e:
                raise WorkspaceError(
                    f"Failed to move {source} to {destination}: {e}"
                ) from e
            logger.debug("Moved %s to %s", source, destination)

        return destination.resolve().as_uri()
