"""Duplicate detection against a snapshot of the device's play queue."""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from group_jukebox.domain.catalog.entities import CatalogItem
from group_jukebox.domain.device.value_objects import QueueItem
from group_jukebox.domain.shared.types import QueuePositionInt


class DuplicateMatchKind(StrEnum):
    URI = "uri"
    NAME_AND_ARTIST = "name_and_artist"


class DuplicateMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    position: QueuePositionInt
    matched_by: DuplicateMatchKind


def find_duplicate(
    queue_items: Sequence[QueueItem] | None, candidate: CatalogItem | None
) -> DuplicateMatch | None:
    """Return where *candidate* already sits in the queue, or None.

    A URI match anywhere in the queue takes priority over a case-insensitive
    name + artist match. Missing input means "no duplicate": a stale or absent
    snapshot may miss a duplicate but must never block a unique add.
    """
    if not queue_items or candidate is None:
        return None

    if candidate.uri:
        for item in queue_items:
            if item.uri == candidate.uri:
                return DuplicateMatch(position=item.position, matched_by=DuplicateMatchKind.URI)

    name = candidate.name.lower()
    artist = candidate.artist.lower()
    if not name or not artist:
        return None

    for item in queue_items:
        if item.title.lower() == name and item.artist.lower() == artist:
            return DuplicateMatch(
                position=item.position, matched_by=DuplicateMatchKind.NAME_AND_ARTIST
            )
    return None
