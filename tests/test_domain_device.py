"""
Unit Tests for the Device Domain

Tests for:
- DeviceState normalisation of raw transport states
- QueueItem / QueueSnapshot validation
- Duplicate detection (URI first, then name + artist)
- Device error code extraction
"""

import pytest
from pydantic import ValidationError
from conftest import make_track

from group_jukebox.domain.device.duplicates import DuplicateMatchKind, find_duplicate
from group_jukebox.domain.device.value_objects import DeviceState, QueueItem, QueueSnapshot
from group_jukebox.domain.shared.exceptions import DeviceError, extract_device_code


class TestDeviceState:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("STOPPED", DeviceState.STOPPED),
            ("playing", DeviceState.PLAYING),
            ("PAUSED_PLAYBACK", DeviceState.PAUSED),
            (" Paused ", DeviceState.PAUSED),
            ("TRANSITIONING", DeviceState.TRANSITIONING),
            ("NO_MEDIA_PRESENT", DeviceState.UNKNOWN),
            (None, DeviceState.UNKNOWN),
            (3, DeviceState.UNKNOWN),
            (DeviceState.PLAYING, DeviceState.PLAYING),
        ],
    )
    def test_parse(self, raw, expected):
        assert DeviceState.parse(raw) is expected

    def test_active_states(self):
        assert DeviceState.PLAYING.is_active
        assert DeviceState.TRANSITIONING.is_active
        assert not DeviceState.PAUSED.is_active
        assert not DeviceState.STOPPED.is_active
        assert not DeviceState.UNKNOWN.is_active

    def test_only_stopped_allows_clearing(self):
        assert [s for s in DeviceState if s.allows_clearing] == [DeviceState.STOPPED]


class TestQueueModels:
    def test_negative_position_rejected(self):
        with pytest.raises(ValidationError):
            QueueItem(uri="x", position=-1)

    def test_snapshot(self):
        snapshot = QueueSnapshot.of([QueueItem(uri="x", position=0)])

        assert len(snapshot) == 1
        assert not snapshot.is_empty
        assert QueueSnapshot.of(None).is_empty


def _queue(*entries):
    return [
        QueueItem(title=title, artist=artist, uri=uri, position=i)
        for i, (title, artist, uri) in enumerate(entries)
    ]


class TestFindDuplicate:
    def test_uri_match(self):
        track = make_track("Everlong", "Foo Fighters", track_id="ever")
        queue = _queue(("A", "B", "spotify:track:a"), ("Other", "Title", track.uri))

        match = find_duplicate(queue, track)

        assert match.position == 1
        assert match.matched_by is DuplicateMatchKind.URI

    def test_name_and_artist_match_is_case_insensitive(self):
        track = make_track("Everlong", "Foo Fighters", track_id="ever")
        queue = _queue(("EVERLONG", "foo fighters", "spotify:track:remaster"))

        match = find_duplicate(queue, track)

        assert match.position == 0
        assert match.matched_by is DuplicateMatchKind.NAME_AND_ARTIST

    def test_uri_match_takes_priority(self):
        track = make_track("Everlong", "Foo Fighters", track_id="ever")
        queue = _queue(
            ("Everlong", "Foo Fighters", "spotify:track:live"),
            ("x", "y", track.uri),
        )

        match = find_duplicate(queue, track)

        assert match.position == 1
        assert match.matched_by is DuplicateMatchKind.URI

    def test_same_title_different_artist_is_not_duplicate(self):
        track = make_track("Hello", "Adele")
        queue = _queue(("Hello", "Lionel Richie", "spotify:track:lionel"))

        assert find_duplicate(queue, track) is None

    def test_missing_input_is_never_duplicate(self):
        track = make_track("Hello", "Adele")

        assert find_duplicate(None, track) is None
        assert find_duplicate([], track) is None
        assert find_duplicate(_queue(("Hello", "Adele", "u")), None) is None

    def test_position_is_reported_from_queue_item(self):
        track = make_track("Hello", "Adele", track_id="hello")
        queue = [QueueItem(title="Hello", artist="Adele", uri=track.uri, position=7)]

        assert find_duplicate(queue, track).position == 7


class TestDeviceErrors:
    def test_extract_device_code(self):
        fault = "UPnP Error 800 received: <errorCode>800</errorCode> from 192.168.1.20"

        assert extract_device_code(fault) == "800"
        assert extract_device_code("connection reset") is None

    def test_region_unavailable(self):
        error = DeviceError("enqueue", "<errorCode> 800 </errorCode>")

        assert error.device_code == "800"
        assert error.is_region_unavailable

    def test_explicit_code(self):
        error = DeviceError("enqueue", "failed", device_code="701")

        assert error.device_code == "701"
        assert not error.is_region_unavailable
        assert error.operation == "enqueue"
