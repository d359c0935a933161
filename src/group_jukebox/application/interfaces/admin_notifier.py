"""Port interface for messages addressed to the bot administrators."""

from __future__ import annotations

from abc import ABC, abstractmethod


class AdminNotifier(ABC):
    """Delivers operational warnings to the configured admin channel."""

    @property
    @abstractmethod
    def admin_channel(self) -> str | None:
        """Channel the warnings go to, or None when no admin channel is set."""
        ...

    @abstractmethod
    async def notify(self, message: str) -> None:
        ...
