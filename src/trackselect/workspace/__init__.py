"""Workspace access for media package files."""

from trackselect.workspace.interface import Workspace, WorkspaceError
from trackselect.workspace.local import LocalWorkspace, uri_to_path

__all__ = [
    "LocalWorkspace",
    "Workspace",
    "WorkspaceError",
    "uri_to_path",
]
