"""Port interface for the networked playback device."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from group_jukebox.domain.shared.types import NonEmptyStr

if TYPE_CHECKING:
    from ...domain.device.value_objects import DeviceState, QueueItem


class PlaybackDevice(ABC):
    """Interface for the remote audio renderer whose queue is being mutated.

    Each method is an independent remote call that may fail (raising
    :class:`~group_jukebox.domain.shared.exceptions.DeviceError`) or hang;
    callers bound every call with their own timeout.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable device name, used for logging and queue naming."""
        ...

    @abstractmethod
    async def get_state(self) -> "DeviceState | str":
        """Current transport state; raw strings are normalised by the caller."""
        ...

    @abstractmethod
    async def get_queue(self) -> list["QueueItem"]:
        ...

    @abstractmethod
    async def stop(self) -> None:
        ...

    @abstractmethod
    async def play(self) -> None:
        ...

    @abstractmethod
    async def flush_queue(self) -> None:
        ...

    @abstractmethod
    async def enqueue(self, uri: NonEmptyStr) -> None:
        """Append *uri* (track, album or playlist) to the end of the queue."""
        ...

    @abstractmethod
    async def seek_to_first(self) -> None:
        """Make the first queue position current, activating the queue as source."""
        ...

    @abstractmethod
    async def skip_next(self) -> None:
        ...
