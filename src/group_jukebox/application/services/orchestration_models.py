"""DTOs for the queue orchestration service."""

from __future__ import annotations

import asyncio
from enum import Enum, StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...domain.catalog.entities import CatalogItem
from ...domain.catalog.value_objects import CatalogItemKind
from ...domain.shared.messages import ErrorMessages
from ...domain.shared.types import NonNegativeInt, QueuePositionInt


class OrchestrationMode(StrEnum):
    """REPLACE may clear a stopped queue; APPEND never clears."""

    REPLACE = "replace"
    APPEND = "append"


class OrchestrationStatus(Enum):
    QUEUED = "queued"
    DUPLICATE = "duplicate"
    BLACKLISTED = "blacklisted"
    ENQUEUE_FAILED = "enqueue_failed"
    REGION_UNAVAILABLE = "region_unavailable"
    DEVICE_BUSY = "device_busy"


class OrchestrationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    item: CatalogItem
    mode: OrchestrationMode = OrchestrationMode.REPLACE
    requested_by: str | None = None
    channel: str | None = None


class BatchOrchestrationRequest(BaseModel):
    """Queue an album or playlist; *tracks* is its full, unfiltered tracklist."""

    model_config = ConfigDict(frozen=True)

    source: CatalogItem
    tracks: list[CatalogItem] = Field(default_factory=list)
    mode: OrchestrationMode = OrchestrationMode.REPLACE
    requested_by: str | None = None
    channel: str | None = None

    @field_validator("source")
    @classmethod
    def source_is_collection(cls, v: CatalogItem) -> CatalogItem:
        if v.kind not in (CatalogItemKind.ALBUM, CatalogItemKind.PLAYLIST):
            raise ValueError(ErrorMessages.BATCH_SOURCE_KIND.format(kind=v.kind))
        return v


class OrchestrationOutcome(BaseModel):
    """What the chat layer reports back, plus a handle on the deferred work.

    ``background_task`` resolves to ``None`` once activation finishes. It never
    carries an exception: background failures are logged where they happen.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    accepted: bool
    status: OrchestrationStatus
    user_message: str
    item: CatalogItem | None = None
    duplicate_position: QueuePositionInt | None = None
    queued_count: NonNegativeInt = 0
    failed_count: NonNegativeInt = 0
    blocked: list[CatalogItem] = Field(default_factory=list)
    background_task: asyncio.Future | None = Field(default=None, exclude=True)

    @property
    def is_success(self) -> bool:
        return self.accepted

    @property
    def has_background(self) -> bool:
        return self.background_task is not None

    def with_background(self, background: asyncio.Future | None) -> OrchestrationOutcome:
        if background is None:
            return self
        return self.model_copy(update={"background_task": background})

    @classmethod
    def queued(
        cls,
        item: CatalogItem,
        message: str,
        *,
        queued_count: int = 1,
        failed_count: int = 0,
        blocked: list[CatalogItem] | None = None,
    ) -> OrchestrationOutcome:
        return cls(
            accepted=True,
            status=OrchestrationStatus.QUEUED,
            user_message=message,
            item=item,
            queued_count=queued_count,
            failed_count=failed_count,
            blocked=blocked or [],
        )

    @classmethod
    def refused(
        cls,
        status: OrchestrationStatus,
        message: str,
        *,
        item: CatalogItem | None = None,
        duplicate_position: int | None = None,
        failed_count: int = 0,
        blocked: list[CatalogItem] | None = None,
    ) -> OrchestrationOutcome:
        return cls(
            accepted=False,
            status=status,
            user_message=message,
            item=item,
            duplicate_position=duplicate_position,
            failed_count=failed_count,
            blocked=blocked or [],
        )
