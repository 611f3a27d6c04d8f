"""Tests for the flavor/tag rewriter."""

import pytest

from trackselect.domain.models import Flavor, Track
from trackselect.selection.rewriter import rewrite_flavor, rewrite_tracks


class TestRewriteFlavor:
    """Tests for rewrite_flavor."""

    def test_keeps_type(self, make_track):
        """Only the subtype changes."""
        track = make_track("presentation/source")
        rewrite_flavor(track, "work")
        assert track.flavor == Flavor("presentation", "work")

    def test_idempotent(self, make_track):
        """Rewriting twice gives the same flavor."""
        track = make_track("presenter/source")
        rewrite_flavor(track, "work")
        rewrite_flavor(track, "work")
        assert track.flavor == Flavor("presenter", "work")

    def test_track_without_flavor(self):
        """A track without flavor cannot be rewritten."""
        with pytest.raises(ValueError, match="has no flavor"):
            rewrite_flavor(Track(flavor=None, uri="file:///a.mp4"), "work")


class TestRewriteTracks:
    """Tests for rewrite_tracks."""

    def test_rewrites_every_track(self, make_track):
        """Every track gets the target subtype and the tag diff."""
        tracks = [make_track("presenter/source"), make_track("slides/source")]

        rewrite_tracks(tracks, Flavor.parse("*/work"), "+engage")

        assert [str(t.flavor) for t in tracks] == ["presenter/work", "slides/work"]
        assert all(t.tags == {"archive", "engage"} for t in tracks)

    def test_no_tags_leaves_tags(self, make_track):
        """Without target tags the tags are untouched."""
        track = make_track(tags=("archive",))
        rewrite_tracks([track], Flavor.parse("*/work"))
        assert track.tags == {"archive"}
