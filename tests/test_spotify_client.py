"""
Unit Tests for SpotifyCatalogClient

Tests for:
- Client-credentials token caching
- Search parsing (null items, nameless playlists, market parameter)
- Offset pagination of album and playlist tracks
- HTTP status mapping and retry behaviour

All HTTP traffic goes through httpx.MockTransport.
"""

import httpx
import pytest
import pytest_asyncio

from group_jukebox.config.settings import CatalogSettings
from group_jukebox.domain.catalog.value_objects import CatalogItemKind
from group_jukebox.domain.shared.exceptions import (
    CatalogAuthError,
    CatalogNotFoundError,
    CatalogRateLimitedError,
    CatalogUnavailableError,
    InvalidReferenceError,
)
from group_jukebox.infrastructure.catalog import spotify_client
from group_jukebox.infrastructure.catalog.spotify_client import SpotifyCatalogClient


def _track(track_id, name="Song", artist="Band", popularity=50):
    return {
        "uri": f"spotify:track:{track_id}",
        "name": name,
        "artists": [{"name": artist}],
        "popularity": popularity,
    }


class FakeSpotify:
    """Routes requests by path; each route is a callable or a list of responses."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, object] = {}
        self.token_responses: list[httpx.Response] = []

    @property
    def token_requests(self):
        return [r for r in self.requests if r.url.path == "/api/token"]

    @property
    def api_requests(self):
        return [r for r in self.requests if r.url.path.startswith("/v1/")]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/api/token":
            if self.token_responses:
                return self.token_responses.pop(0)
            return httpx.Response(200, json={"access_token": "tok-1", "expires_in": 3600})

        route = self.routes[request.url.path.removeprefix("/v1/")]
        if isinstance(route, list):
            return route.pop(0)
        return route(request)


@pytest.fixture(autouse=True)
def _no_backoff(monkeypatch):
    monkeypatch.setattr(spotify_client, "_jitter", lambda n: 0.0)


@pytest.fixture
def spotify():
    return FakeSpotify()


@pytest_asyncio.fixture
async def client(spotify):
    http = httpx.AsyncClient(transport=httpx.MockTransport(spotify))
    settings = CatalogSettings(client_id="id", client_secret="secret", market="se")
    yield SpotifyCatalogClient(settings, http_client=http)
    await http.aclose()


# =============================================================================
# Token handling
# =============================================================================


class TestAccessToken:
    @pytest.mark.asyncio
    async def test_token_is_cached(self, client, spotify):
        spotify.routes["search"] = lambda r: httpx.Response(200, json={"tracks": {"items": []}})

        await client.search_tracks("a", 5)
        await client.search_tracks("b", 5)

        assert len(spotify.token_requests) == 1
        assert spotify.token_requests[0].headers["Authorization"].startswith("Basic ")
        assert all(r.headers["Authorization"] == "Bearer tok-1" for r in spotify.api_requests)

    @pytest.mark.asyncio
    async def test_missing_credentials(self, spotify):
        http = httpx.AsyncClient(transport=httpx.MockTransport(spotify))
        client = SpotifyCatalogClient(CatalogSettings(), http_client=http)

        with pytest.raises(CatalogAuthError):
            await client.search_tracks("x", 5)

        assert spotify.requests == []
        await http.aclose()

    @pytest.mark.asyncio
    async def test_rejected_credentials(self, client, spotify):
        spotify.token_responses.append(httpx.Response(400, json={"error": "invalid_client"}))

        with pytest.raises(CatalogAuthError):
            await client.search_tracks("x", 5)

    @pytest.mark.asyncio
    async def test_unauthorized_response_forces_new_token(self, client, spotify):
        spotify.routes["search"] = [
            httpx.Response(401),
            httpx.Response(200, json={"tracks": {"items": []}}),
        ]

        with pytest.raises(CatalogAuthError):
            await client.search_tracks("x", 5)
        await client.search_tracks("x", 5)

        assert len(spotify.token_requests) == 2


# =============================================================================
# Search
# =============================================================================


class TestSearch:
    @pytest.mark.asyncio
    async def test_search_tracks(self, client, spotify):
        spotify.routes["search"] = lambda r: httpx.Response(
            200,
            json={"tracks": {"items": [_track("t1", "Everlong", "Foo Fighters", 88), None]}},
        )

        items = await client.search_tracks("everlong", 3)

        assert [i.uri for i in items] == ["spotify:track:t1"]
        assert items[0].artist == "Foo Fighters"
        assert items[0].popularity == 88
        params = spotify.api_requests[0].url.params
        assert params["q"] == "everlong"
        assert params["type"] == "track"
        assert params["limit"] == "3"
        assert params["market"] == "SE"

    @pytest.mark.asyncio
    async def test_search_albums(self, client, spotify):
        spotify.routes["search"] = lambda r: httpx.Response(
            200,
            json={
                "albums": {
                    "items": [
                        {
                            "uri": "spotify:album:a1",
                            "name": "Abbey Road",
                            "artists": [{"name": "The Beatles"}],
                            "total_tracks": 17,
                            "images": [{"url": "https://i.scdn.co/image/abc"}],
                        }
                    ]
                }
            },
        )

        items = await client.search_albums("abbey road", 3)

        assert items[0].kind is CatalogItemKind.ALBUM
        assert items[0].total_tracks == 17
        assert items[0].cover_url == "https://i.scdn.co/image/abc"

    @pytest.mark.asyncio
    async def test_search_playlists_skips_null_and_nameless(self, client, spotify):
        spotify.routes["search"] = lambda r: httpx.Response(
            200,
            json={
                "playlists": {
                    "items": [
                        None,
                        {"uri": "spotify:playlist:p0", "name": ""},
                        {
                            "uri": "spotify:playlist:p1",
                            "name": "Road Trip",
                            "owner": {"display_name": "dana"},
                            "tracks": {"total": 42},
                        },
                        {"uri": "spotify:playlist:p2", "name": "Anon", "owner": None},
                    ]
                }
            },
        )

        items = await client.search_playlists("road", 5)

        assert [i.name for i in items] == ["Road Trip", "Anon"]
        assert items[0].artist == "dana"
        assert items[0].total_tracks == 42
        assert items[1].artist == "Unknown"


# =============================================================================
# Lookups and pagination
# =============================================================================


class TestLookups:
    @pytest.mark.asyncio
    async def test_get_track(self, client, spotify):
        spotify.routes["tracks/t1"] = lambda r: httpx.Response(200, json=_track("t1", "Everlong"))

        item = await client.get_track("https://open.spotify.com/track/t1")

        assert item.name == "Everlong"

    @pytest.mark.asyncio
    async def test_get_track_not_found(self, client, spotify):
        spotify.routes["tracks/gone"] = lambda r: httpx.Response(404)

        with pytest.raises(CatalogNotFoundError):
            await client.get_track("spotify:track:gone")

    @pytest.mark.asyncio
    async def test_wrong_kind_never_hits_network(self, client, spotify):
        with pytest.raises(InvalidReferenceError):
            await client.get_album("spotify:track:t1")

        assert spotify.requests == []

    @pytest.mark.asyncio
    async def test_album_tracks_are_paginated(self, client, spotify):
        def album_tracks(request):
            offset = int(request.url.params["offset"])
            count = 50 if offset == 0 else 3
            items = [_track(f"t{offset + i}") for i in range(count)]
            return httpx.Response(200, json={"items": items, "total": 53})

        spotify.routes["albums/a1/tracks"] = album_tracks

        tracks = await client.get_album_tracks("spotify:album:a1")

        assert len(tracks) == 53
        assert [r.url.params["offset"] for r in spotify.api_requests] == ["0", "50"]
        assert tracks[-1].uri == "spotify:track:t52"

    @pytest.mark.asyncio
    async def test_playlist_tracks_skip_removed_and_episodes(self, client, spotify):
        spotify.routes["playlists/p1/tracks"] = lambda r: httpx.Response(
            200,
            json={
                "items": [
                    {"track": _track("keep1")},
                    {"track": None},
                    {"track": {"uri": "spotify:episode:e1", "name": "Podcast"}},
                    {"track": _track("keep2")},
                ]
            },
        )

        tracks = await client.get_playlist_tracks("spotify:playlist:p1")

        assert [t.uri for t in tracks] == ["spotify:track:keep1", "spotify:track:keep2"]
        assert len(spotify.api_requests) == 1


# =============================================================================
# Retries and status mapping
# =============================================================================


class TestRetries:
    @pytest.mark.asyncio
    async def test_rate_limit_is_retried(self, client, spotify):
        spotify.routes["tracks/t1"] = [
            httpx.Response(429, headers={"Retry-After": "0"}),
            httpx.Response(200, json=_track("t1")),
        ]

        item = await client.get_track("spotify:track:t1")

        assert item.uri == "spotify:track:t1"
        assert len(spotify.api_requests) == 2

    @pytest.mark.asyncio
    async def test_rate_limit_exhausted(self, client, spotify):
        spotify.routes["tracks/t1"] = lambda r: httpx.Response(429, headers={"Retry-After": "0"})

        with pytest.raises(CatalogRateLimitedError):
            await client.get_track("spotify:track:t1")

        assert len(spotify.api_requests) == 3

    @pytest.mark.asyncio
    async def test_server_error_exhausts_attempts(self, client, spotify):
        spotify.routes["search"] = lambda r: httpx.Response(503)

        with pytest.raises(CatalogUnavailableError):
            await client.search_tracks("x", 5)

        assert len(spotify.api_requests) == 3

    @pytest.mark.asyncio
    async def test_transport_error_is_unavailable(self, client, spotify):
        def boom(request):
            raise httpx.ConnectError("connection refused", request=request)

        spotify.routes["search"] = boom

        with pytest.raises(CatalogUnavailableError):
            await client.search_tracks("x", 5)

    @pytest.mark.asyncio
    async def test_forbidden_is_not_retried(self, client, spotify):
        spotify.routes["search"] = lambda r: httpx.Response(403)

        with pytest.raises(CatalogAuthError):
            await client.search_tracks("x", 5)

        assert len(spotify.api_requests) == 1


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_injected_client_is_not_closed(self, spotify):
        http = httpx.AsyncClient(transport=httpx.MockTransport(spotify))
        client = SpotifyCatalogClient(
            CatalogSettings(client_id="id", client_secret="s"), http_client=http
        )

        await client.aclose()

        assert not http.is_closed
        await http.aclose()

    def test_market_is_normalised(self):
        client = SpotifyCatalogClient(CatalogSettings(market="gb"))

        assert client.market == "GB"
