"""Catalog entities returned by the music catalog service."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from group_jukebox.domain.catalog.value_objects import CatalogItemKind
from group_jukebox.domain.shared.types import (
    CatalogUri,
    HttpUrlStr,
    NonNegativeInt,
    Popularity,
)


class CatalogItem(BaseModel):
    """Immutable track, album or playlist as returned by the catalog.

    For playlists ``artist`` holds the owner's display name so that the
    blacklist predicate and display code can treat every kind uniformly.
    """

    model_config = ConfigDict(frozen=True)

    uri: CatalogUri
    name: str = ""
    artist: str = ""
    kind: CatalogItemKind = CatalogItemKind.TRACK

    popularity: Popularity | None = None
    followers: NonNegativeInt | None = None
    total_tracks: NonNegativeInt | None = None
    cover_url: HttpUrlStr | None = None

    @property
    def id(self) -> str:
        return self.uri.rsplit(":", 1)[-1]

    @property
    def display_name(self) -> str:
        if self.artist:
            return f"{self.name} by {self.artist}"
        return self.name

    def __str__(self) -> str:
        return self.display_name
