"""Workspace protocol.

The workspace owns the files backing media package elements. Files
produced by compute jobs are relocated into it under the owning media
package and element.
"""

from typing import Protocol


class WorkspaceError(Exception):
    """Raised when a file cannot be relocated into the workspace."""


class Workspace(Protocol):
    """Protocol for workspace implementations."""

    def move_to(
        self,
        uri: str,
        mediapackage_id: str,
        element_id: str,
        file_name: str,
    ) -> str:
        """Move the file at uri into the workspace.

        Args:
            uri: Current location of the file.
            mediapackage_id: Owning media package.
            element_id: Identifier of the element the file backs.
            file_name: File name to use at the destination.

        Returns:
            URI of the file at its new location.

        Raises:
            WorkspaceError: If the file cannot be moved.
        """
        ...
