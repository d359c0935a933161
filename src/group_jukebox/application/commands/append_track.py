"""Command and handler for appending a track without ever clearing the queue."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator

from ...domain.catalog.ranking import drop_invalid, rank_tracks
from ...domain.catalog.value_objects import CatalogItemKind, CatalogReference
from ...domain.shared.exceptions import CatalogError, CatalogNotFoundError, InvalidReferenceError
from ...domain.shared.messages import LogTemplates, UserMessages
from ..services.orchestration_models import OrchestrationMode, OrchestrationRequest
from .add_result import AddResult, AddStatus

if TYPE_CHECKING:
    from ...domain.catalog.entities import CatalogItem
    from ..interfaces.catalog_service import CatalogService
    from ..services.queue_orchestrator import QueueOrchestrator

logger = logging.getLogger(__name__)

DEFAULT_CANDIDATES = 3


class AppendTrackCommand(BaseModel):
    """Append a track (search phrase, link or URI) to the end of the queue."""

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


class AppendTrackHandler:
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

    async def handle(self, command: AppendTrackCommand) -> AddResult:
        if not command.query:
            return AddResult.error(AddStatus.USAGE, UserMessages.APPEND_USAGE)

        logger.info(LogTemplates.COMMAND_RECEIVED, "append", command.user_name, command.query)

        try:
            track = await self._resolve(command.query)
        except InvalidReferenceError as e:
            return AddResult.error(AddStatus.INVALID_REFERENCE, e.message)
        except CatalogNotFoundError:
            return AddResult.error(AddStatus.NOT_FOUND, UserMessages.NOTHING_FOUND)
        except CatalogError as e:
            logger.warning(LogTemplates.COMMAND_CATALOG_FAILED, command.query, e.message)
            return AddResult.error(AddStatus.CATALOG_ERROR, UserMessages.NOTHING_FOUND)

        if track is None:
            return AddResult.error(AddStatus.NOT_FOUND, UserMessages.NOTHING_FOUND)

        outcome = await self._orchestrator.orchestrate(
            OrchestrationRequest(
                item=track,
                mode=OrchestrationMode.APPEND,
                requested_by=command.user_name,
                channel=command.channel,
            )
        )
        return AddResult.from_outcome(outcome)

    async def _resolve(self, query: str) -> CatalogItem | None:
        if CatalogReference.looks_like_reference(query):
            reference = CatalogReference.parse(query, expected=CatalogItemKind.TRACK)
            return await self._catalog.get_track(reference.uri)

        results = await self._catalog.search_tracks(query, self._candidates)
        candidates = drop_invalid(rank_tracks(results, query), CatalogItemKind.TRACK)
        return candidates[0] if candidates else None
