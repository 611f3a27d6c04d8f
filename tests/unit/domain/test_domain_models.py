"""Tests for domain models."""

import pytest

from trackselect.domain.enums import AudioMuxing
from trackselect.domain.models import Flavor, MediaPackage, Track


class TestFlavor:
    """Tests for Flavor parsing and matching."""

    def test_parse(self):
        """Should split type and subtype."""
        flavor = Flavor.parse("presenter/source")
        assert flavor.type == "presenter"
        assert flavor.subtype == "source"

    def test_parse_strips_whitespace(self):
        """Surrounding whitespace is ignored."""
        assert Flavor.parse("  presenter / work ") == Flavor("presenter", "work")

    @pytest.mark.parametrize("value", ["presenter", "/source", "presenter/", "a/b/c", ""])
    def test_parse_rejects_invalid(self, value):
        """Strings not of the form type/subtype raise ValueError."""
        with pytest.raises(ValueError, match="Invalid flavor"):
            Flavor.parse(value)

    def test_str_round_trip(self):
        """str() renders type/subtype."""
        assert str(Flavor("presentation", "work")) == "presentation/work"

    def test_wildcard_type_matches(self):
        """*/source matches any type with subtype source."""
        assert Flavor.parse("*/source").matches(Flavor.parse("presenter/source"))
        assert not Flavor.parse("*/source").matches(Flavor.parse("presenter/work"))

    def test_wildcard_subtype_matches(self):
        """presenter/* matches any presenter subtype."""
        assert Flavor.parse("presenter/*").matches(Flavor.parse("presenter/work"))
        assert not Flavor.parse("presenter/*").matches(Flavor.parse("slides/work"))

    def test_with_subtype_keeps_type(self):
        """with_subtype() only replaces the subtype."""
        assert Flavor("presenter", "source").with_subtype("work") == Flavor(
            "presenter", "work"
        )


class TestTrack:
    """Tests for Track."""

    def test_flavor_type(self, make_track):
        """flavor_type is the type part of the flavor."""
        assert make_track("presentation/source").flavor_type == "presentation"

    def test_flavor_type_without_flavor(self):
        """A track without flavor has no flavor type."""
        assert Track(flavor=None, uri="file:///a.mp4").flavor_type is None

    def test_clone_is_independent(self, make_track):
        """Changing the clone's tags or flavor leaves the original alone."""
        track = make_track(tags=("archive",))
        clone = track.clone()

        clone.tags.add("engage")
        clone.flavor = Flavor("presenter", "work")

        assert track.tags == {"archive"}
        assert track.flavor == Flavor("presenter", "source")
        assert clone.identifier == track.identifier


class TestMediaPackage:
    """Tests for MediaPackage."""

    def test_get_tracks_by_flavor(self, make_track, make_mediapackage):
        """Only tracks matching the (wildcard) flavor are returned, in order."""
        presenter = make_track("presenter/source")
        presentation = make_track("presentation/source")
        work = make_track("presenter/work", identifier="work")
        mp = make_mediapackage(presenter, work, presentation)

        assert mp.get_tracks_by_flavor(Flavor.parse("*/source")) == [
            presenter,
            presentation,
        ]

    def test_add_assigns_identifier(self, make_mediapackage):
        """Tracks without identifier get a fresh one."""
        mp = make_mediapackage()
        track = mp.add(Track(flavor=None, uri="file:///a.mp4"))

        assert track.identifier is not None
        assert mp.get_track(track.identifier) is track

    def test_add_keeps_existing_identifier(self, make_mediapackage):
        """Tracks that already have an identifier keep it."""
        mp = make_mediapackage()
        mp.add(Track(flavor=None, uri="file:///a.mp4", identifier="t1"))
        assert mp.get_track("t1") is not None

    def test_add_assigns_distinct_identifiers(self, make_mediapackage):
        """Two added tracks never share an identifier."""
        mp = make_mediapackage()
        first = mp.add(Track(flavor=None, uri="file:///a.mp4"))
        second = mp.add(Track(flavor=None, uri="file:///b.mp4"))
        assert first.identifier != second.identifier


class TestAudioMuxing:
    """Tests for AudioMuxing parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("none", AudioMuxing.NONE),
            ("force", AudioMuxing.FORCE),
            ("duplicate", AudioMuxing.DUPLICATE),
        ],
    )
    def test_from_string(self, value, expected):
        """Known values map to their mode."""
        assert AudioMuxing.from_string(value) is expected

    def test_from_string_rejects_unknown(self):
        """Unknown values raise ValueError naming the value."""
        with pytest.raises(ValueError, match='invalid audio muxing parameter "mix"'):
            AudioMuxing.from_string("mix")
