"""Pydantic models for Spotify Web API responses.

These are infrastructure-specific models: they parse only the fields the
application uses and convert to :class:`CatalogItem` at the boundary.
Unknown fields are ignored so API additions never break parsing.
"""

from __future__ import annotations

from typing import Final, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from group_jukebox.domain.catalog.entities import CatalogItem
from group_jukebox.domain.catalog.value_objects import CatalogItemKind

TOKEN_EXPIRY_MARGIN_S: Final[int] = 10
ALBUM_TRACKS_PAGE_SIZE: Final[int] = 50
PLAYLIST_TRACKS_PAGE_SIZE: Final[int] = 100

T = TypeVar("T")


class SpotifyModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ArtistRef(SpotifyModel):
    name: str = ""


class ImageRef(SpotifyModel):
    url: str


class Total(SpotifyModel):
    total: int | None = None


class OwnerRef(SpotifyModel):
    display_name: str | None = None


def _first_artist(artists: list[ArtistRef]) -> str:
    return artists[0].name if artists else ""


def _cover(images: list[ImageRef] | None) -> str | None:
    return images[0].url if images else None


class TrackObject(SpotifyModel):
    uri: str
    name: str = ""
    artists: list[ArtistRef] = Field(default_factory=list)
    popularity: int | None = None

    def to_domain(self) -> CatalogItem:
        return CatalogItem(
            uri=self.uri,
            name=self.name,
            artist=_first_artist(self.artists),
            kind=CatalogItemKind.TRACK,
            popularity=self.popularity,
        )


class AlbumObject(SpotifyModel):
    uri: str
    name: str = ""
    artists: list[ArtistRef] = Field(default_factory=list)
    popularity: int | None = None
    total_tracks: int | None = None
    images: list[ImageRef] | None = None

    def to_domain(self) -> CatalogItem:
        return CatalogItem(
            uri=self.uri,
            name=self.name,
            artist=_first_artist(self.artists),
            kind=CatalogItemKind.ALBUM,
            popularity=self.popularity,
            total_tracks=self.total_tracks,
            cover_url=_cover(self.images),
        )


class PlaylistObject(SpotifyModel):
    uri: str
    name: str = ""
    owner: OwnerRef | None = None
    tracks: Total | None = None
    followers: Total | None = None
    images: list[ImageRef] | None = None

    def to_domain(self) -> CatalogItem:
        return CatalogItem(
            uri=self.uri,
            name=self.name,
            artist=(self.owner.display_name if self.owner else None) or "Unknown",
            kind=CatalogItemKind.PLAYLIST,
            followers=self.followers.total if self.followers else None,
            total_tracks=self.tracks.total if self.tracks else None,
            cover_url=_cover(self.images),
        )


class Page(SpotifyModel, Generic[T]):
    """One page of a paginated listing; the API returns null for removed entries."""

    items: list[T | None] = Field(default_factory=list)
    total: int | None = None

    def present(self) -> list[T]:
        return [item for item in self.items if item is not None]


class SearchResponse(SpotifyModel):
    tracks: Page[TrackObject] | None = None
    albums: Page[AlbumObject] | None = None
    playlists: Page[PlaylistObject] | None = None


class PlaylistEntry(SpotifyModel):
    """Playlist item wrapper; ``track`` is null when the track was removed."""

    track: TrackObject | None = None


class TokenResponse(SpotifyModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 3600

    @property
    def lifetime_s(self) -> int:
        return max(self.expires_in - TOKEN_EXPIRY_MARGIN_S, 0)
