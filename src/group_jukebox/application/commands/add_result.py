"""Result type shared by the add/append/album/playlist commands."""

from __future__ import annotations

import asyncio
from enum import Enum

from pydantic import BaseModel, ConfigDict

from ...domain.catalog.entities import CatalogItem
from ..services.orchestration_models import OrchestrationOutcome, OrchestrationStatus


class AddStatus(Enum):
    """Status codes for add command results."""

    QUEUED = "queued"
    USAGE = "usage"
    INVALID_REFERENCE = "invalid_reference"
    NOT_FOUND = "not_found"
    INVALID_CANDIDATES = "invalid_candidates"
    CATALOG_ERROR = "catalog_error"
    BLACKLISTED = "blacklisted"
    DUPLICATE = "duplicate"
    REGION_UNAVAILABLE = "region_unavailable"
    ENQUEUE_FAILED = "enqueue_failed"
    DEVICE_BUSY = "device_busy"


_FROM_OUTCOME: dict[OrchestrationStatus, AddStatus] = {
    OrchestrationStatus.QUEUED: AddStatus.QUEUED,
    OrchestrationStatus.DUPLICATE: AddStatus.DUPLICATE,
    OrchestrationStatus.BLACKLISTED: AddStatus.BLACKLISTED,
    OrchestrationStatus.ENQUEUE_FAILED: AddStatus.ENQUEUE_FAILED,
    OrchestrationStatus.REGION_UNAVAILABLE: AddStatus.REGION_UNAVAILABLE,
    OrchestrationStatus.DEVICE_BUSY: AddStatus.DEVICE_BUSY,
}


class AddResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: AddStatus
    message: str
    item: CatalogItem | None = None
    outcome: OrchestrationOutcome | None = None

    @property
    def is_success(self) -> bool:
        return self.status == AddStatus.QUEUED

    @property
    def background_task(self) -> asyncio.Future | None:
        return self.outcome.background_task if self.outcome is not None else None

    @classmethod
    def from_outcome(cls, outcome: OrchestrationOutcome) -> AddResult:
        return cls(
            status=_FROM_OUTCOME[outcome.status],
            message=outcome.user_message,
            item=outcome.item,
            outcome=outcome,
        )

    @classmethod
    def error(cls, status: AddStatus, message: str) -> AddResult:
        return cls(status=status, message=message)
