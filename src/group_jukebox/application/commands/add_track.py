"""Command and handler for adding the best-matching track to the queue."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator

from ...domain.catalog.ranking import drop_invalid, rank_tracks
from ...domain.catalog.value_objects import CatalogItemKind
from ...domain.shared.exceptions import CatalogError
from ...domain.shared.messages import LogTemplates, UserMessages
from ..services.orchestration_models import OrchestrationMode, OrchestrationRequest
from .add_result import AddResult, AddStatus

if TYPE_CHECKING:
    from ..interfaces.catalog_service import CatalogService
    from ..services.queue_orchestrator import QueueOrchestrator

logger = logging.getLogger(__name__)

DEFAULT_CANDIDATES = 3


class AddTrackCommand(BaseModel):
    """Search for a track and add the best match, replacing a stopped queue."""

    model_config = ConfigDict(frozen=True)

    query: str
    user_name: str = "unknown"
    channel: str | None = None

    @field_validator("query", mode="before")
    @classmethod
    def _strip_query(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v


class AddTrackHandler:
    def __init__(
        self,
        *,
        catalog: CatalogService,
        orchestrator: QueueOrchestrator,
        candidates: int = DEFAULT_CANDIDATES,
    ) -> None:
        self._catalog = catalog
        self._orchestrator = orchestrator
        self._candidates = candidates

    async def handle(self, command: AddTrackCommand) -> AddResult:
        if not command.query:
            return AddResult.error(AddStatus.USAGE, UserMessages.ADD_USAGE)

        logger.info(LogTemplates.COMMAND_RECEIVED, "add", command.user_name, command.query)

        try:
            results = await self._catalog.search_tracks(command.query, self._candidates)
        except CatalogError as e:
            logger.warning(LogTemplates.COMMAND_CATALOG_FAILED, command.query, e.message)
            return AddResult.error(AddStatus.CATALOG_ERROR, UserMessages.NOTHING_FOUND)

        if not results:
            return AddResult.error(AddStatus.NOT_FOUND, UserMessages.NOTHING_FOUND)

        candidates = drop_invalid(rank_tracks(results, command.query), CatalogItemKind.TRACK)
        if not candidates:
            return AddResult.error(AddStatus.INVALID_CANDIDATES, UserMessages.INVALID_CANDIDATES)

        # Only the top candidate is considered, even when it is blacklisted.
        outcome = await self._orchestrator.orchestrate(
            OrchestrationRequest(
                item=candidates[0],
                mode=OrchestrationMode.REPLACE,
                requested_by=command.user_name,
                channel=command.channel,
            )
        )
        return AddResult.from_outcome(outcome)
