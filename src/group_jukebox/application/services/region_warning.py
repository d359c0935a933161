"""Subscriber that warns the admins when the device rejects a track for its market."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.shared.events import RegionUnavailable, get_event_bus
from ...domain.shared.messages import LogTemplates, UserMessages

if TYPE_CHECKING:
    from ...domain.shared.events import EventBus
    from ..interfaces.admin_notifier import AdminNotifier

logger = logging.getLogger(__name__)


def format_market_options(options: tuple[str, ...] | list[str], current: str) -> str:
    return ", ".join(f"*{m}* (current)" if m == current else m for m in options)


class RegionWarningNotifier:
    """Subscribes to RegionUnavailable and posts a configuration hint to the admins.

    Nothing is posted when no admin channel is configured or when the failing
    request came from the admin channel itself (they already saw the reply).
    """

    def __init__(
        self,
        *,
        notifier: AdminNotifier,
        market: str,
        market_options: tuple[str, ...],
        event_bus: EventBus | None = None,
    ) -> None:
        self._notifier = notifier
        self._market = market
        self._market_options = market_options
        self._bus = event_bus or get_event_bus()
        self._started = False

    @property
    def is_started(self) -> bool:
        return self._started

    def start(self) -> None:
        if self._started:
            return
        self._bus.subscribe(RegionUnavailable, self._on_region_unavailable)
        self._started = True

    def stop(self) -> None:
        if not self._started:
            return
        self._bus.unsubscribe(RegionUnavailable, self._on_region_unavailable)
        self._started = False

    def build_message(self, event: RegionUnavailable) -> str:
        return UserMessages.REGION_WARNING.format(
            name=event.item_name,
            artist=event.item_artist,
            market=self._market,
            options=format_market_options(self._market_options, self._market),
        )

    async def _on_region_unavailable(self, event: RegionUnavailable) -> None:
        logger.warning(LogTemplates.REGION_UNAVAILABLE, event.item_name, self._market)

        admin_channel = self._notifier.admin_channel
        if not admin_channel or event.origin_channel == admin_channel:
            return

        try:
            await self._notifier.notify(self.build_message(event))
        except Exception:
            logger.exception(LogTemplates.ADMIN_NOTIFY_FAILED, event.item_name)
