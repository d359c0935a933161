"""
Device Bounded Context

What the playback device reports: transport state, queue snapshots, and
duplicate detection against them.
"""

from group_jukebox.domain.device.duplicates import (
    DuplicateMatch,
    DuplicateMatchKind,
    find_duplicate,
)
from group_jukebox.domain.device.value_objects import DeviceState, QueueItem, QueueSnapshot

__all__ = [
    "DeviceState",
    "QueueItem",
    "QueueSnapshot",
    "DuplicateMatch",
    "DuplicateMatchKind",
    "find_duplicate",
]
