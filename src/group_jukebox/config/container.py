"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the catalog client, the queue orchestrator,
subscribers and handlers. Components are created on-demand and cached.

The playback device and the admin notifier belong to the chat/device
adapters that embed this package; they are handed in with ``set_device()``
and ``set_admin_notifier()``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.commands.add_album import AddAlbumHandler
    from ..application.commands.add_playlist import AddPlaylistHandler
    from ..application.commands.add_track import AddTrackHandler
    from ..application.commands.append_track import AppendTrackHandler
    from ..application.interfaces.admin_notifier import AdminNotifier
    from ..application.interfaces.catalog_service import CatalogService
    from ..application.interfaces.playback_device import PlaybackDevice
    from ..application.queries.search_catalog import SearchCatalogHandler
    from ..application.services.queue_orchestrator import QueueOrchestrator
    from ..application.services.region_warning import RegionWarningNotifier
    from ..domain.catalog.blacklist import TermBlacklist
    from ..domain.shared.events import EventBus
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed.
    """

    settings: Settings

    # Externally supplied adapters
    _device: PlaybackDevice | None = None
    _admin_notifier: AdminNotifier | None = None

    # Infrastructure adapters
    _catalog: CatalogService | None = None

    # Domain services
    _blacklist: TermBlacklist | None = None

    # Application services
    _orchestrator: QueueOrchestrator | None = None

    # Cross-cutting event subscribers
    _region_warning_notifier: RegionWarningNotifier | None = None

    # Command handlers
    _add_track_handler: AddTrackHandler | None = None
    _append_track_handler: AppendTrackHandler | None = None
    _add_album_handler: AddAlbumHandler | None = None
    _add_playlist_handler: AddPlaylistHandler | None = None

    # Query handlers
    _search_handler: SearchCatalogHandler | None = None

    def set_device(self, device: PlaybackDevice) -> None:
        """Set the playback device whose queue the handlers mutate."""
        self._device = device

    def set_admin_notifier(self, notifier: AdminNotifier) -> None:
        self._admin_notifier = notifier

    @property
    def device(self) -> PlaybackDevice:
        if self._device is None:
            raise RuntimeError(ErrorMessages.DEVICE_NOT_CONFIGURED)
        return self._device

    @property
    def event_bus(self) -> EventBus:
        from ..domain.shared.events import get_event_bus

        return get_event_bus()

    # === Infrastructure ===

    @property
    def catalog(self) -> CatalogService:
        """Get the catalog service (Spotify Web API client)."""
        if self._catalog is None:
            from ..infrastructure.catalog.spotify_client import SpotifyCatalogClient

            self._catalog = SpotifyCatalogClient(self.settings.catalog)
        return self._catalog

    # === Domain Services ===

    @property
    def blacklist(self) -> TermBlacklist:
        if self._blacklist is None:
            from ..domain.catalog.blacklist import TermBlacklist

            self._blacklist = TermBlacklist(self.settings.blacklist.terms)
        return self._blacklist

    # === Application Services ===

    @property
    def orchestrator(self) -> QueueOrchestrator:
        """Get the queue orchestrator bound to the configured device."""
        if self._orchestrator is None:
            from ..application.services.queue_orchestrator import QueueOrchestrator

            self._orchestrator = QueueOrchestrator(
                device=self.device,
                settings=self.settings.orchestration,
                is_blacklisted=self.blacklist,
                event_bus=self.event_bus,
            )
        return self._orchestrator

    @property
    def region_warning_notifier(self) -> RegionWarningNotifier | None:
        """Region warning subscriber, or None when no admin notifier is set."""
        if self._region_warning_notifier is None and self._admin_notifier is not None:
            from ..application.services.region_warning import RegionWarningNotifier

            self._region_warning_notifier = RegionWarningNotifier(
                notifier=self._admin_notifier,
                market=self.settings.catalog.market,
                market_options=self.settings.admin.market_options,
                event_bus=self.event_bus,
            )
        return self._region_warning_notifier

    # === Command Handlers ===

    @property
    def add_track_handler(self) -> AddTrackHandler:
        if self._add_track_handler is None:
            from ..application.commands.add_track import AddTrackHandler

            self._add_track_handler = AddTrackHandler(
                catalog=self.catalog,
                orchestrator=self.orchestrator,
                candidates=self.settings.search.add_track_candidates,
            )
        return self._add_track_handler

    @property
    def append_track_handler(self) -> AppendTrackHandler:
        if self._append_track_handler is None:
            from ..application.commands.append_track import AppendTrackHandler

            self._append_track_handler = AppendTrackHandler(
                catalog=self.catalog,
                orchestrator=self.orchestrator,
                candidates=self.settings.search.add_track_candidates,
            )
        return self._append_track_handler

    @property
    def add_album_handler(self) -> AddAlbumHandler:
        if self._add_album_handler is None:
            from ..application.commands.add_album import AddAlbumHandler

            self._add_album_handler = AddAlbumHandler(
                catalog=self.catalog,
                orchestrator=self.orchestrator,
                candidates=self.settings.search.album_candidates,
            )
        return self._add_album_handler

    @property
    def add_playlist_handler(self) -> AddPlaylistHandler:
        if self._add_playlist_handler is None:
            from ..application.commands.add_playlist import AddPlaylistHandler

            self._add_playlist_handler = AddPlaylistHandler(
                catalog=self.catalog,
                orchestrator=self.orchestrator,
                candidates=self.settings.search.playlist_candidates,
            )
        return self._add_playlist_handler

    # === Query Handlers ===

    @property
    def search_handler(self) -> SearchCatalogHandler:
        if self._search_handler is None:
            from ..application.queries.search_catalog import SearchCatalogHandler

            self._search_handler = SearchCatalogHandler(catalog=self.catalog)
        return self._search_handler

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Start cross-cutting subscribers."""
        notifier = self.region_warning_notifier
        if notifier is not None:
            notifier.start()

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        try:
            if self._region_warning_notifier is not None:
                self._region_warning_notifier.stop()
        except Exception as exc:
            logger.warning("Failed stopping region warning subscriber: %r", exc)

        if self._orchestrator is not None:
            await self._orchestrator.close()

        aclose = getattr(self._catalog, "aclose", None)
        if aclose is not None:
            await aclose()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
