import asyncio

import pytest

from group_jukebox.application.interfaces.catalog_service import CatalogService
from group_jukebox.application.interfaces.playback_device import PlaybackDevice
from group_jukebox.config.settings import OrchestrationSettings
from group_jukebox.domain.catalog.entities import CatalogItem
from group_jukebox.domain.catalog.value_objects import CatalogItemKind
from group_jukebox.domain.device.value_objects import QueueItem
from group_jukebox.domain.shared.exceptions import CatalogNotFoundError

# ============================================================================
# Device Fixtures
# ============================================================================


class FakeDevice(PlaybackDevice):
    """In-memory playback device that records every remote call in order.

    ``failures`` maps an operation name to the exception it raises;
    operations listed in ``hang`` never complete.
    """

    def __init__(self, state="stopped", queue=None, name="Living Room"):
        self.state = state
        self.queue: list[QueueItem] = list(queue or [])
        self.calls: list[str] = []
        self.enqueued: list[str] = []
        self.failures: dict[str, Exception] = {}
        self.hang: set[str] = set()
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    async def _op(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.hang:
            await asyncio.Event().wait()
        exc = self.failures.get(operation)
        if exc is not None:
            raise exc

    async def get_state(self):
        await self._op("get_state")
        return self.state

    async def get_queue(self):
        await self._op("get_queue")
        return list(self.queue)

    async def stop(self):
        await self._op("stop")
        self.state = "stopped"

    async def play(self):
        await self._op("play")
        self.state = "playing"

    async def flush_queue(self):
        await self._op("flush_queue")
        self.queue.clear()

    async def enqueue(self, uri):
        await self._op("enqueue")
        self.enqueued.append(uri)
        self.queue.append(QueueItem(uri=uri, position=len(self.queue)))

    async def seek_to_first(self):
        await self._op("seek_to_first")

    async def skip_next(self):
        await self._op("skip_next")


@pytest.fixture
def device():
    """Stopped device with an empty queue."""
    return FakeDevice()


@pytest.fixture
def fast_settings():
    """Orchestration settings with every delay set to zero."""
    return OrchestrationSettings(
        settle_delay_s=0.0,
        activation_delay_s=0.0,
        poll_interval_s=0.0,
        append_play_delay_s=0.0,
        device_call_timeout_s=1.0,
    )


# ============================================================================
# Catalog Fixtures
# ============================================================================


def make_track(name, artist, track_id=None, popularity=50):
    track_id = track_id or "".join(ch for ch in f"{name}{artist}" if ch.isalnum())[:22] or "x"
    return CatalogItem(
        uri=f"spotify:track:{track_id}",
        name=name,
        artist=artist,
        kind=CatalogItemKind.TRACK,
        popularity=popularity,
    )


def make_album(name, artist, album_id="album1", total_tracks=10):
    return CatalogItem(
        uri=f"spotify:album:{album_id}",
        name=name,
        artist=artist,
        kind=CatalogItemKind.ALBUM,
        total_tracks=total_tracks,
    )


def make_playlist(name, owner, playlist_id="playlist1", followers=0, total_tracks=20):
    return CatalogItem(
        uri=f"spotify:playlist:{playlist_id}",
        name=name,
        artist=owner,
        kind=CatalogItemKind.PLAYLIST,
        followers=followers,
        total_tracks=total_tracks,
    )


class FakeCatalog(CatalogService):
    """Catalog backed by plain lists; lookups go by URI.

    Set ``error`` to make every call raise it.
    """

    def __init__(self, tracks=(), albums=(), playlists=(), collection_tracks=None):
        self.tracks = list(tracks)
        self.albums = list(albums)
        self.playlists = list(playlists)
        self.collection_tracks = dict(collection_tracks or {})
        self.error: Exception | None = None
        self.calls: list[tuple[str, object]] = []

    def _record(self, name, arg):
        self.calls.append((name, arg))
        if self.error is not None:
            raise self.error

    async def search_tracks(self, query, limit):
        self._record("search_tracks", query)
        return self.tracks[:limit]

    async def search_albums(self, query, limit):
        self._record("search_albums", query)
        return self.albums[:limit]

    async def search_playlists(self, query, limit):
        self._record("search_playlists", query)
        return self.playlists[:limit]

    def _lookup(self, items, uri):
        for item in items:
            if item.uri == uri:
                return item
        raise CatalogNotFoundError(uri)

    async def get_track(self, uri):
        self._record("get_track", uri)
        return self._lookup(self.tracks, uri)

    async def get_album(self, uri):
        self._record("get_album", uri)
        return self._lookup(self.albums, uri)

    async def get_playlist(self, uri):
        self._record("get_playlist", uri)
        return self._lookup(self.playlists, uri)

    async def get_album_tracks(self, uri):
        self._record("get_album_tracks", uri)
        return list(self.collection_tracks.get(uri, []))

    async def get_playlist_tracks(self, uri):
        self._record("get_playlist_tracks", uri)
        return list(self.collection_tracks.get(uri, []))


@pytest.fixture
def sample_track():
    """A sample track for testing."""
    return make_track("Best of You", "Foo Fighters", track_id="bestofyou")


@pytest.fixture
def sample_album():
    return make_album("Abbey Road", "The Beatles", album_id="abbeyroad")


@pytest.fixture
def album_tracks():
    """Ten album tracks; the helper makes ids unique per name."""
    return [make_track(f"Song {i}", "The Beatles", track_id=f"song{i}") for i in range(1, 11)]


# ============================================================================
# Global State
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset the event bus singleton and settings cache around each test."""
    from group_jukebox.config.settings import clear_settings_cache
    from group_jukebox.domain.shared.events import reset_event_bus

    reset_event_bus()
    clear_settings_cache()
    yield
    reset_event_bus()
    clear_settings_cache()
