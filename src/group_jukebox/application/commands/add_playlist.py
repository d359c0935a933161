"""Command and handler for adding a whole playlist."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...domain.catalog.value_objects import CatalogItemKind
from ...domain.shared.messages import UserMessages
from .add_collection import AddCollectionCommand, AddCollectionHandler

if TYPE_CHECKING:
    from ...domain.catalog.entities import CatalogItem
    from ..interfaces.catalog_service import CatalogService
    from ..services.queue_orchestrator import QueueOrchestrator

DEFAULT_CANDIDATES = 5


class AddPlaylistCommand(AddCollectionCommand):
    """Playlist name, link or URI."""


class AddPlaylistHandler(AddCollectionHandler):
    kind = CatalogItemKind.PLAYLIST
    command_name = "addplaylist"
    usage_message = UserMessages.PLAYLIST_USAGE
    not_found_message = UserMessages.PLAYLIST_NOT_FOUND

    def __init__(
        self,
        *,
        catalog: CatalogService,
        orchestrator: QueueOrchestrator,
        candidates: int = DEFAULT_CANDIDATES,
    ) -> None:
        super().__init__(catalog=catalog, orchestrator=orchestrator, candidates=candidates)

    async def _search(self, query: str, limit: int) -> list[CatalogItem]:
        return await self._catalog.search_playlists(query, limit)

    async def _lookup(self, uri: str) -> CatalogItem:
        return await self._catalog.get_playlist(uri)

    async def _tracks(self, uri: str) -> list[CatalogItem]:
        return await self._catalog.get_playlist_tracks(uri)
