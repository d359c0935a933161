"""
Unit Tests for the Catalog Domain

Tests for:
- CatalogItem validation and display helpers
- CatalogReference parsing of URIs and share links
- TermBlacklist matching and the allowed/blocked partition
"""

import pytest
from pydantic import ValidationError
from conftest import make_album, make_track

from group_jukebox.domain.catalog.blacklist import (
    BlacklistPartition,
    TermBlacklist,
    allow_everything,
    partition,
)
from group_jukebox.domain.catalog.entities import CatalogItem
from group_jukebox.domain.catalog.value_objects import CatalogItemKind, CatalogReference
from group_jukebox.domain.shared.exceptions import InvalidReferenceError

# =============================================================================
# CatalogItem
# =============================================================================


class TestCatalogItem:
    def test_id_and_display_name(self):
        item = make_track("Everlong", "Foo Fighters", track_id="abc")

        assert item.id == "abc"
        assert item.display_name == "Everlong by Foo Fighters"
        assert str(item) == "Everlong by Foo Fighters"

    def test_display_name_without_artist(self):
        assert CatalogItem(uri="spotify:track:x", name="Solo").display_name == "Solo"

    def test_empty_uri_rejected(self):
        with pytest.raises(ValidationError):
            CatalogItem(uri="", name="x")

    def test_popularity_range(self):
        with pytest.raises(ValidationError):
            CatalogItem(uri="spotify:track:x", popularity=101)

    def test_frozen(self):
        item = make_track("A", "B")
        with pytest.raises(ValidationError):
            item.name = "C"

    def test_is_collection(self):
        assert not CatalogItemKind.TRACK.is_collection
        assert CatalogItemKind.ALBUM.is_collection
        assert CatalogItemKind.PLAYLIST.is_collection


# =============================================================================
# CatalogReference
# =============================================================================


class TestCatalogReference:
    @pytest.mark.parametrize(
        "text,kind,item_id",
        [
            ("spotify:track:4uLU6hMCjMI75M1A2tKUQC", CatalogItemKind.TRACK, "4uLU6hMCjMI75M1A2tKUQC"),
            ("https://open.spotify.com/album/1A2GTWGtFfWp7KSQTwWOyo", CatalogItemKind.ALBUM, "1A2GTWGtFfWp7KSQTwWOyo"),
            ("https://open.spotify.com/playlist/37i9dQZF1DX?si=abc", CatalogItemKind.PLAYLIST, "37i9dQZF1DX"),
            ("https://open.spotify.com/intl-de/track/abc123", CatalogItemKind.TRACK, "abc123"),
            ("  spotify:album:xyz  ", CatalogItemKind.ALBUM, "xyz"),
        ],
    )
    def test_parse(self, text, kind, item_id):
        reference = CatalogReference.parse(text)

        assert reference.kind is kind
        assert reference.item_id == item_id
        assert reference.uri == f"spotify:{kind.value}:{item_id}"

    @pytest.mark.parametrize(
        "text", ["", "not a link", "spotify:artist:abc", "https://example.com/track/abc"]
    )
    def test_parse_invalid(self, text):
        with pytest.raises(InvalidReferenceError):
            CatalogReference.parse(text)

    def test_parse_wrong_kind(self):
        with pytest.raises(InvalidReferenceError, match="Expected a album link"):
            CatalogReference.parse("spotify:track:abc", expected=CatalogItemKind.ALBUM)

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("spotify:track:abc", True),
            ("https://open.spotify.com/track/abc", True),
            ("Foo Fighters - Best of You", False),
            ("", False),
            (None, False),
        ],
    )
    def test_looks_like_reference(self, text, expected):
        assert CatalogReference.looks_like_reference(text) is expected

    def test_is_valid_uri(self):
        assert CatalogReference.is_valid_uri("spotify:track:abc")
        assert CatalogReference.is_valid_uri("spotify:track:abc", CatalogItemKind.TRACK)
        assert not CatalogReference.is_valid_uri("spotify:track:abc", CatalogItemKind.ALBUM)
        assert not CatalogReference.is_valid_uri("spotify:episode:abc")
        assert not CatalogReference.is_valid_uri(None)


# =============================================================================
# Blacklist
# =============================================================================


class TestTermBlacklist:
    def test_matches_name_or_artist_case_insensitively(self):
        blacklist = TermBlacklist(["Nickelback", "frog"])

        assert blacklist.is_blacklisted("Photograph", "NICKELBACK")
        assert blacklist.is_blacklisted("Axel F (Crazy Frog)", "Crazy Frog")
        assert not blacklist.is_blacklisted("Everlong", "Foo Fighters")

    def test_substring_match(self):
        assert TermBlacklist(["back"])("Anything", "Nickelback")

    def test_blank_and_duplicate_terms_ignored(self):
        blacklist = TermBlacklist(["  ", "", "Abba", "abba "])

        assert blacklist.terms == ("abba",)
        assert len(blacklist) == 1

    def test_empty_blacklist_allows_everything(self):
        assert not TermBlacklist()("anything", "anyone")
        assert not allow_everything("anything", "anyone")


class TestPartition:
    def test_keeps_order_in_both_lists(self):
        tracks = [make_track(f"Song {i}", "Band", track_id=f"s{i}") for i in range(1, 6)]

        split = partition(tracks, TermBlacklist(["Song 2", "Song 4"]))

        assert [t.name for t in split.allowed] == ["Song 1", "Song 3", "Song 5"]
        assert [t.name for t in split.blocked] == ["Song 2", "Song 4"]
        assert split.total == 5
        assert split.has_blocked
        assert not split.all_blocked

    def test_all_blocked(self):
        split = partition([make_track("A", "Bad Band")], TermBlacklist(["bad"]))

        assert split.all_blocked

    def test_empty_input_is_not_all_blocked(self):
        split = partition([], TermBlacklist(["bad"]))

        assert not split.all_blocked
        assert split.total == 0

    def test_skipped_summary(self):
        split = BlacklistPartition(blocked=[make_track("Bad Song", "X")])

        assert split.skipped_summary() == "\nSkipped 1 blacklisted track(s): *Bad Song*"

    def test_skipped_summary_truncates(self):
        blocked = [make_track(f"Bad {i}", "X", track_id=f"b{i}") for i in range(8)]

        summary = BlacklistPartition(blocked=blocked).skipped_summary(limit=5)

        assert summary.startswith("\nSkipped 8 blacklisted track(s): *Bad 0*")
        assert "*Bad 4*" in summary
        assert "*Bad 5*" not in summary
        assert summary.endswith(" and 3 more")

    def test_no_summary_when_nothing_blocked(self):
        assert BlacklistPartition(allowed=[make_album("A", "B")]).skipped_summary() == ""
