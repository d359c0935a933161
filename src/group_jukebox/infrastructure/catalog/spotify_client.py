"""Spotify Web API catalog client (client-credentials flow) on httpx."""

from __future__ import annotations

import asyncio
import logging
import random
import time
from collections.abc import Callable
from typing import Any, Final, TypeVar

import httpx

from group_jukebox.application.interfaces.catalog_service import CatalogService
from group_jukebox.config.settings import CatalogSettings
from group_jukebox.domain.catalog.entities import CatalogItem
from group_jukebox.domain.catalog.value_objects import CatalogItemKind, CatalogReference
from group_jukebox.domain.shared.exceptions import (
    CatalogAuthError,
    CatalogError,
    CatalogNotFoundError,
    CatalogRateLimitedError,
    CatalogUnavailableError,
)
from group_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from group_jukebox.infrastructure.catalog.models import (
    ALBUM_TRACKS_PAGE_SIZE,
    PLAYLIST_TRACKS_PAGE_SIZE,
    AlbumObject,
    Page,
    PlaylistEntry,
    PlaylistObject,
    SearchResponse,
    TokenResponse,
    TrackObject,
)

logger = logging.getLogger(__name__)

BACKOFF_BASE: Final[float] = 0.35
MAX_RETRY_AFTER_S: Final[float] = 5.0

M = TypeVar("M")


def _jitter(n: int) -> float:
    return BACKOFF_BASE * (2 ** (n - 1)) + random.random() * 0.2


def _retry_after(response: httpx.Response) -> float | None:
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class SpotifyCatalogClient(CatalogService):
    """Catalog service backed by the Spotify Web API.

    The access token is cached until ten seconds before it expires. Every
    request carries the configured market. Rate limiting and transient
    failures are retried with jittered backoff up to ``max_attempts``.
    """

    def __init__(
        self,
        settings: CatalogSettings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or CatalogSettings()
        self._client = http_client
        self._owns_client = http_client is None

        self._token: str | None = None
        self._token_expires_at: float = 0.0
        self._token_lock = asyncio.Lock()

    @property
    def market(self) -> str:
        return self._settings.market

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.request_timeout_s)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search_tracks(self, query: str, limit: int) -> list[CatalogItem]:
        response = await self._search(query, "track", limit)
        items = [t.to_domain() for t in response.tracks.present()] if response.tracks else []
        logger.debug(LogTemplates.CATALOG_SEARCH, "track", query, limit, len(items))
        return items

    async def search_albums(self, query: str, limit: int) -> list[CatalogItem]:
        response = await self._search(query, "album", limit)
        items = [a.to_domain() for a in response.albums.present()] if response.albums else []
        logger.debug(LogTemplates.CATALOG_SEARCH, "album", query, limit, len(items))
        return items

    async def search_playlists(self, query: str, limit: int) -> list[CatalogItem]:
        response = await self._search(query, "playlist", limit)
        items = (
            [p.to_domain() for p in response.playlists.present() if p.name]
            if response.playlists
            else []
        )
        logger.debug(LogTemplates.CATALOG_SEARCH, "playlist", query, limit, len(items))
        return items

    async def _search(self, query: str, kind: str, limit: int) -> SearchResponse:
        data = await self._get("search", {"q": query, "type": kind, "limit": limit})
        return SearchResponse.model_validate(data)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    async def get_track(self, uri: str) -> CatalogItem:
        reference = CatalogReference.parse(uri, expected=CatalogItemKind.TRACK)
        data = await self._get(f"tracks/{reference.item_id}")
        return TrackObject.model_validate(data).to_domain()

    async def get_album(self, uri: str) -> CatalogItem:
        reference = CatalogReference.parse(uri, expected=CatalogItemKind.ALBUM)
        data = await self._get(f"albums/{reference.item_id}")
        return AlbumObject.model_validate(data).to_domain()

    async def get_playlist(self, uri: str) -> CatalogItem:
        reference = CatalogReference.parse(uri, expected=CatalogItemKind.PLAYLIST)
        data = await self._get(f"playlists/{reference.item_id}")
        return PlaylistObject.model_validate(data).to_domain()

    async def get_album_tracks(self, uri: str) -> list[CatalogItem]:
        reference = CatalogReference.parse(uri, expected=CatalogItemKind.ALBUM)

        def parse(page: dict[str, Any]) -> list[CatalogItem]:
            return [track.to_domain() for track in Page[TrackObject].model_validate(page).present()]

        return await self._paginate(
            f"albums/{reference.item_id}/tracks",
            ALBUM_TRACKS_PAGE_SIZE,
            parse,
            label=reference.uri,
        )

    async def get_playlist_tracks(self, uri: str) -> list[CatalogItem]:
        reference = CatalogReference.parse(uri, expected=CatalogItemKind.PLAYLIST)
        skipped = 0

        def parse(page: dict[str, Any]) -> list[CatalogItem]:
            nonlocal skipped
            tracks: list[CatalogItem] = []
            for entry in Page[PlaylistEntry].model_validate(page).items:
                # Removed tracks come back as null; podcast episodes are not queueable.
                if entry is None or entry.track is None or not CatalogReference.is_valid_uri(
                    entry.track.uri, CatalogItemKind.TRACK
                ):
                    skipped += 1
                    continue
                tracks.append(entry.track.to_domain())
            return tracks

        tracks = await self._paginate(
            f"playlists/{reference.item_id}/tracks",
            PLAYLIST_TRACKS_PAGE_SIZE,
            parse,
            label=reference.uri,
        )
        if skipped:
            logger.info(LogTemplates.CATALOG_NULL_ITEMS_SKIPPED, skipped, reference.uri)
        return tracks

    async def _paginate(
        self,
        path: str,
        page_size: int,
        parse: Callable[[dict[str, Any]], list[M]],
        *,
        label: str,
    ) -> list[M]:
        """Walk offset pagination until a short or empty page."""
        collected: list[M] = []
        offset = 0
        pages = 0

        while True:
            data = await self._get(path, {"limit": page_size, "offset": offset})
            pages += 1
            raw_items = data.get("items") or []
            if not raw_items:
                break

            collected.extend(parse(data))
            if len(raw_items) < page_size:
                break
            offset += page_size

        logger.debug(LogTemplates.CATALOG_PAGINATED, len(collected), label, pages)
        return collected

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    async def _access_token(self) -> str:
        async with self._token_lock:
            if self._token and time.monotonic() < self._token_expires_at:
                return self._token

            if not self._settings.has_credentials:
                raise CatalogAuthError(ErrorMessages.CATALOG_CREDENTIALS_REQUIRED)

            try:
                response = await self._get_client().post(
                    self._settings.token_url,
                    data={"grant_type": "client_credentials"},
                    auth=(
                        self._settings.client_id,
                        self._settings.client_secret.get_secret_value(),
                    ),
                )
            except httpx.HTTPError as e:
                raise CatalogUnavailableError(str(e) or e.__class__.__name__) from e

            if response.status_code in (400, 401, 403):
                raise CatalogAuthError(
                    ErrorMessages.CATALOG_TOKEN_FAILED.format(status=response.status_code)
                )
            if response.status_code != 200:
                raise CatalogUnavailableError(
                    ErrorMessages.CATALOG_TOKEN_FAILED.format(status=response.status_code)
                )

            token = TokenResponse.model_validate(response.json())
            self._token = token.access_token
            self._token_expires_at = time.monotonic() + token.lifetime_s
            logger.info(LogTemplates.CATALOG_TOKEN_REFRESHED, token.lifetime_s)
            return self._token

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        attempts = self._settings.max_attempts
        last_exc: CatalogError | None = None

        for attempt in range(1, attempts + 1):
            try:
                return await self._request_once(path, params or {})
            except (CatalogRateLimitedError, CatalogUnavailableError) as e:
                last_exc = e
                if attempt >= attempts:
                    break
                logger.warning(
                    LogTemplates.CATALOG_RETRY, path, e.__class__.__name__, attempt, attempts
                )
                delay = _jitter(attempt)
                if isinstance(e, CatalogRateLimitedError) and e.retry_after is not None:
                    delay = min(e.retry_after, MAX_RETRY_AFTER_S)
                await asyncio.sleep(delay)

        raise last_exc or CatalogUnavailableError()

    async def _request_once(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        token = await self._access_token()
        url = f"{self._settings.api_base_url.rstrip('/')}/{path}"
        logger.debug(LogTemplates.CATALOG_REQUEST, "GET", path)

        try:
            response = await self._get_client().get(
                url,
                params={**params, "market": self._settings.market},
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            raise CatalogUnavailableError(str(e) or e.__class__.__name__) from e

        status = response.status_code
        if status == 200:
            return response.json()
        if status == 401:
            # Token revoked or expired early; fetch a fresh one next time.
            self._token = None
            raise CatalogAuthError()
        if status == 403:
            raise CatalogAuthError()
        if status == 404:
            raise CatalogNotFoundError(path)
        if status == 429:
            raise CatalogRateLimitedError(_retry_after(response))
        raise CatalogUnavailableError(
            ErrorMessages.CATALOG_UNEXPECTED_STATUS.format(status=status, path=path)
        )
