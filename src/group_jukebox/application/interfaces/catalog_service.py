"""Port interface for the music catalog service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from group_jukebox.domain.shared.types import NonEmptyStr, SearchLimit

if TYPE_CHECKING:
    from ...domain.catalog.entities import CatalogItem


class CatalogService(ABC):
    """Interface for resolving text queries and references to catalog items.

    Every method may raise a :class:`~group_jukebox.domain.shared.exceptions.CatalogError`
    subclass on not-found, rate-limit, auth or network failure.
    """

    @abstractmethod
    async def search_tracks(self, query: NonEmptyStr, limit: SearchLimit) -> list["CatalogItem"]:
        ...

    @abstractmethod
    async def search_albums(self, query: NonEmptyStr, limit: SearchLimit) -> list["CatalogItem"]:
        ...

    @abstractmethod
    async def search_playlists(
        self, query: NonEmptyStr, limit: SearchLimit
    ) -> list["CatalogItem"]:
        ...

    @abstractmethod
    async def get_track(self, uri: NonEmptyStr) -> "CatalogItem":
        """Look up one track by URI."""
        ...

    @abstractmethod
    async def get_album(self, uri: NonEmptyStr) -> "CatalogItem":
        """Look up one album by URI."""
        ...

    @abstractmethod
    async def get_playlist(self, uri: NonEmptyStr) -> "CatalogItem":
        """Look up one playlist by URI."""
        ...

    @abstractmethod
    async def get_album_tracks(self, uri: NonEmptyStr) -> list["CatalogItem"]:
        """All tracks of an album, in album order."""
        ...

    @abstractmethod
    async def get_playlist_tracks(self, uri: NonEmptyStr) -> list["CatalogItem"]:
        """All still-available tracks of a playlist, in playlist order."""
        ...
