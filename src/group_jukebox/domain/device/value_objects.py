"""Value objects describing what the playback device reported."""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from group_jukebox.domain.shared.types import QueuePositionInt, UtcDatetimeField, utcnow


class DeviceState(StrEnum):
    """Transport state polled from the device.

    Never cached beyond a single orchestration step.
    """

    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"
    TRANSITIONING = "transitioning"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: Any) -> DeviceState:
        """Map a raw device value onto the enum; anything unrecognised is UNKNOWN."""
        if isinstance(raw, DeviceState):
            return raw
        if not isinstance(raw, str):
            return cls.UNKNOWN
        value = raw.strip().lower()
        # UPnP AVTransport spells paused as PAUSED_PLAYBACK.
        if value == "paused_playback":
            return cls.PAUSED
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_active(self) -> bool:
        """Something is flowing (or about to): never start playback over it."""
        return self in {DeviceState.PLAYING, DeviceState.TRANSITIONING}

    @property
    def allows_clearing(self) -> bool:
        return self is DeviceState.STOPPED


class QueueItem(BaseModel):
    """One slot in the device's live play queue.

    ``position`` is authoritative only at the moment of the snapshot.
    """

    model_config = ConfigDict(frozen=True)

    title: str = ""
    artist: str = ""
    uri: str = ""
    position: QueuePositionInt


class QueueSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: list[QueueItem] = Field(default_factory=list)
    taken_at: UtcDatetimeField = Field(default_factory=utcnow)

    @classmethod
    def of(cls, items: Sequence[QueueItem] | None) -> QueueSnapshot:
        return cls(items=list(items or ()))

    def __len__(self) -> int:
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items
