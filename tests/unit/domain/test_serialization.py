"""Tests for track and manifest serialization."""

import json

import pytest

from trackselect.domain.models import Flavor, MediaPackage, Track
from trackselect.domain.serialization import (
    ManifestError,
    load_manifest,
    save_manifest,
    track_from_dict,
    track_from_json,
    track_to_dict,
)


class TestTrackSerialization:
    """Tests for track descriptors."""

    def test_track_to_dict(self, make_track):
        """All fields are written with their JSON keys."""
        track = make_track(tags=("b", "a"))
        track.mimetype = "video/mp4"
        track.duration_ms = 1500

        assert track_to_dict(track) == {
            "id": "presenter-source",
            "flavor": "presenter/source",
            "uri": "file:///ingest/presenter.mov",
            "audio": True,
            "video": True,
            "tags": ["a", "b"],
            "mimetype": "video/mp4",
            "duration": 1500,
        }

    def test_track_from_json_defaults(self):
        """Missing optional fields get defaults."""
        track = track_from_json('{"uri": "file:///out/job.mp4"}')

        assert track.uri == "file:///out/job.mp4"
        assert track.flavor is None
        assert track.identifier is None
        assert track.has_audio is False
        assert track.has_video is False
        assert track.tags == set()

    def test_track_from_dict_parses_flavor(self):
        """The flavor string is parsed into a Flavor."""
        track = track_from_dict({"uri": "file:///a.mp4", "flavor": "presenter/work"})
        assert track.flavor == Flavor("presenter", "work")

    def test_invalid_json_raises(self):
        """Non-JSON payloads raise ManifestError."""
        with pytest.raises(ManifestError, match="Invalid track payload"):
            track_from_json("<track/>")

    def test_missing_uri_raises(self):
        """A descriptor without uri raises ManifestError."""
        with pytest.raises(ManifestError, match="uri"):
            track_from_json('{"id": "t1"}')

    def test_invalid_flavor_raises(self):
        """A malformed flavor raises ManifestError."""
        with pytest.raises(ManifestError, match="Invalid flavor"):
            track_from_dict({"uri": "file:///a.mp4", "flavor": "presenter"})

    def test_non_object_raises(self):
        """A JSON array is not a track descriptor."""
        with pytest.raises(ManifestError):
            track_from_json("[]")

    @pytest.mark.parametrize(
        "field,value",
        [
            ("id", 42),
            ("flavor", 5),
            ("uri", ["file:///a.mp4"]),
            ("mimetype", {"type": "video"}),
        ],
    )
    def test_non_string_fields_raise(self, field, value):
        """String fields of another JSON type are rejected."""
        data = {"uri": "file:///a.mp4", field: value}
        with pytest.raises(ManifestError, match=f"'{field}' must be a string"):
            track_from_dict(data)

    @pytest.mark.parametrize("value", ["1500", 1.5, True])
    def test_non_integer_duration_raises(self, value):
        with pytest.raises(ManifestError, match="'duration' must be an integer"):
            track_from_dict({"uri": "file:///a.mp4", "duration": value})


class TestManifests:
    """Tests for loading and saving manifests."""

    def test_save_and_load(self, tmp_path, make_track):
        """A saved manifest loads back with the same tracks."""
        mp = MediaPackage("mp-1", [make_track(), make_track("slides/source")], "Talk")
        path = tmp_path / "out" / "mp.json"

        save_manifest(mp, path)
        loaded = load_manifest(path)

        assert loaded.identifier == "mp-1"
        assert loaded.title == "Talk"
        assert [t.identifier for t in loaded.tracks] == [
            "presenter-source",
            "slides-source",
        ]

    def test_load_missing_file(self, tmp_path):
        """A missing manifest raises ManifestError."""
        with pytest.raises(ManifestError, match="Cannot read manifest"):
            load_manifest(tmp_path / "missing.json")

    def test_load_invalid_json(self, tmp_path):
        """Invalid JSON raises ManifestError."""
        path = tmp_path / "mp.json"
        path.write_text("{not json")
        with pytest.raises(ManifestError, match="Invalid JSON"):
            load_manifest(path)

    def test_load_requires_id(self, tmp_path):
        """A manifest without id raises ManifestError."""
        path = tmp_path / "mp.json"
        path.write_text(json.dumps({"tracks": []}))
        with pytest.raises(ManifestError, match="missing 'id'"):
            load_manifest(path)
