"""Query and handler for listing catalog search results without touching the device."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...domain.catalog.entities import CatalogItem
from ...domain.catalog.ranking import rank
from ...domain.catalog.value_objects import CatalogItemKind
from ...domain.shared.exceptions import CatalogError
from ...domain.shared.messages import LogTemplates, UserMessages
from ...domain.shared.types import SearchLimit

if TYPE_CHECKING:
    from ..interfaces.catalog_service import CatalogService

logger = logging.getLogger(__name__)

_COMMAND_NAMES: dict[CatalogItemKind, str] = {
    CatalogItemKind.TRACK: "search",
    CatalogItemKind.ALBUM: "searchalbum",
    CatalogItemKind.PLAYLIST: "searchplaylist",
}


class SearchCatalogQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: CatalogItemKind = CatalogItemKind.TRACK
    query: str
    limit: SearchLimit = 10

    @field_validator("query", mode="before")
    @classmethod
    def _strip_query(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v


class SearchCatalogResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: list[CatalogItem] = Field(default_factory=list)
    message: str
    ok: bool = True

    @property
    def count(self) -> int:
        return len(self.items)


def render_listing(items: list[CatalogItem], kind: CatalogItemKind) -> str:
    noun = str(kind) if len(items) == 1 else f"{kind}s"
    lines = [UserMessages.SEARCH_HEADER.format(count=len(items), noun=noun)]
    for index, item in enumerate(items, start=1):
        line = UserMessages.SEARCH_LINE.format(index=index, name=item.name, artist=item.artist)
        if kind is CatalogItemKind.PLAYLIST and item.total_tracks is not None:
            line += UserMessages.SEARCH_TRACK_COUNT.format(count=item.total_tracks)
        lines.append(line)
    return "\n".join(lines)


class SearchCatalogHandler:
    """Searches the catalog, ranks the hits and renders a numbered list."""

    def __init__(self, *, catalog: CatalogService) -> None:
        self._catalog = catalog

    async def handle(self, query: SearchCatalogQuery) -> SearchCatalogResult:
        if not query.query:
            return SearchCatalogResult(
                message=UserMessages.SEARCH_USAGE.format(command=_COMMAND_NAMES[query.kind]),
                ok=False,
            )

        try:
            results = await self._search(query)
        except CatalogError as e:
            logger.warning(LogTemplates.COMMAND_CATALOG_FAILED, query.query, e.message)
            return SearchCatalogResult(message=UserMessages.SEARCH_FAILED, ok=False)

        ranked = rank(results, query.query)
        if not ranked:
            return SearchCatalogResult(message=UserMessages.NOTHING_FOUND, ok=False)

        return SearchCatalogResult(items=ranked, message=render_listing(ranked, query.kind))

    async def _search(self, query: SearchCatalogQuery) -> list[CatalogItem]:
        if query.kind is CatalogItemKind.ALBUM:
            return await self._catalog.search_albums(query.query, query.limit)
        if query.kind is CatalogItemKind.PLAYLIST:
            return await self._catalog.search_playlists(query.query, query.limit)
        return await self._catalog.search_tracks(query.query, query.limit)
