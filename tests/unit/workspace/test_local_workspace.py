"""Tests for the local filesystem workspace."""

from pathlib import Path

import pytest

from trackselect.workspace.interface import WorkspaceError
from trackselect.workspace.local import LocalWorkspace, uri_to_path


class TestUriToPath:
    """Tests for uri_to_path."""

    def test_file_uri(self):
        assert uri_to_path("file:///media/in/talk%201.mp4") == Path("/media/in/talk 1.mp4")

    def test_plain_path(self):
        assert uri_to_path("/media/in/talk.mp4") == Path("/media/in/talk.mp4")

    def test_other_scheme(self):
        with pytest.raises(WorkspaceError, match="Unsupported URI scheme"):
            uri_to_path("http://host/talk.mp4")


class TestMoveTo:
    """Tests for LocalWorkspace.move_to."""

    def test_moves_into_element_directory(self, tmp_path: Path):
        """The file ends up at <root>/<mp>/<element>/<name>."""
        source = tmp_path / "scratch" / "job-1.mp4"
        source.parent.mkdir()
        source.write_bytes(b"media")
        workspace = LocalWorkspace(tmp_path / "ws")

        uri = workspace.move_to(source.as_uri(), "mp-1", "track-9", "talk.mp4")

        destination = tmp_path / "ws" / "mp-1" / "track-9" / "talk.mp4"
        assert uri == destination.resolve().as_uri()
        assert destination.read_bytes() == b"media"
        assert not source.exists()

    def test_accepts_plain_paths(self, tmp_path: Path):
        source = tmp_path / "job-1.mp4"
        source.write_bytes(b"media")
        workspace = LocalWorkspace(tmp_path / "ws")

        workspace.move_to(str(source), "mp-1", "t", "talk.mp4")

        assert workspace.path_for("mp-1", "t", "talk.mp4").exists()

    def test_moving_onto_itself_is_a_no_op(self, tmp_path: Path):
        workspace = LocalWorkspace(tmp_path / "ws")
        target = workspace.path_for("mp-1", "t", "talk.mp4")
        target.parent.mkdir(parents=True)
        target.write_bytes(b"media")

        uri = workspace.move_to(target.as_uri(), "mp-1", "t", "talk.mp4")

        assert uri == target.resolve().as_uri()
        assert target.read_bytes() == b"media"

    def test_missing_source(self, tmp_path: Path):
        workspace = LocalWorkspace(tmp_path / "ws")
        with pytest.raises(WorkspaceError, match="not found"):
            workspace.move_to((tmp_path / "gone.mp4").as_uri(), "mp-1", "t", "a.mp4")

    @pytest.mark.parametrize(
        "mediapackage_id,element_id,file_name",
        [
            ("..", "t", "a.mp4"),
            ("mp-1", "../x", "a.mp4"),
            ("mp-1", "t", "../../a.mp4"),
            ("mp-1", "", "a.mp4"),
            ("mp-1", "t", "sub\\a.mp4"),
        ],
    )
    def test_rejects_components_leaving_the_root(
        self, tmp_path: Path, mediapackage_id, element_id, file_name
    ):
        """Identifiers and names must be single path segments."""
        source = tmp_path / "job-1.mp4"
        source.write_bytes(b"media")
        workspace = LocalWorkspace(tmp_path / "ws")

        with pytest.raises(WorkspaceError, match="Invalid workspace path component"):
            workspace.move_to(str(source), mediapackage_id, element_id, file_name)
        assert source.exists()
        assert not (tmp_path / "x").exists()
