"""Shared flow for queueing a whole album or playlist."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator

from ...domain.catalog.ranking import drop_invalid, rank
from ...domain.catalog.value_objects import CatalogItemKind, CatalogReference
from ...domain.shared.exceptions import CatalogError, CatalogNotFoundError, InvalidReferenceError
from ...domain.shared.messages import LogTemplates
from ..services.orchestration_models import BatchOrchestrationRequest, OrchestrationMode
from .add_result import AddResult, AddStatus

if TYPE_CHECKING:
    from ...domain.catalog.entities import CatalogItem
    from ..interfaces.catalog_service import CatalogService
    from ..services.queue_orchestrator import QueueOrchestrator

logger = logging.getLogger(__name__)


class AddCollectionCommand(BaseModel):
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


class AddCollectionHandler(ABC):
    """Resolve a collection, fetch its tracks and hand both to the orchestrator.

    Subclasses bind the catalog calls and user messages for one kind.
    """

    kind: CatalogItemKind
    command_name: str
    usage_message: str
    not_found_message: str

    def __init__(
        self,
        *,
        catalog: CatalogService,
        orchestrator: QueueOrchestrator,
        candidates: int,
    ) -> None:
        self._catalog = catalog
        self._orchestrator = orchestrator
        self._candidates = candidates

    @abstractmethod
    async def _search(self, query: str, limit: int) -> list[CatalogItem]: ...

    @abstractmethod
    async def _lookup(self, uri: str) -> CatalogItem: ...

    @abstractmethod
    async def _tracks(self, uri: str) -> list[CatalogItem]: ...

    async def handle(self, command: AddCollectionCommand) -> AddResult:
        if not command.query:
            return AddResult.error(AddStatus.USAGE, self.usage_message)

        logger.info(LogTemplates.COMMAND_RECEIVED, self.command_name, command.user_name, command.query)

        try:
            source = await self._resolve(command.query)
            if source is None:
                return AddResult.error(AddStatus.NOT_FOUND, self.not_found_message)

            logger.info(LogTemplates.SELECTED_SOURCE, self.kind, source.name, source.artist)
            tracks = await self._tracks(source.uri)
        except InvalidReferenceError as e:
            return AddResult.error(AddStatus.INVALID_REFERENCE, e.message)
        except CatalogNotFoundError:
            return AddResult.error(AddStatus.NOT_FOUND, self.not_found_message)
        except CatalogError as e:
            logger.warning(LogTemplates.COMMAND_CATALOG_FAILED, command.query, e.message)
            return AddResult.error(AddStatus.CATALOG_ERROR, self.not_found_message)

        outcome = await self._orchestrator.orchestrate_batch(
            BatchOrchestrationRequest(
                source=source,
                tracks=tracks,
                mode=OrchestrationMode.REPLACE,
                requested_by=command.user_name,
                channel=command.channel,
            )
        )
        return AddResult.from_outcome(outcome)

    async def _resolve(self, query: str) -> CatalogItem | None:
        if CatalogReference.looks_like_reference(query):
            reference = CatalogReference.parse(query, expected=self.kind)
            return await self._lookup(reference.uri)

        results = await self._search(query, self._candidates)
        candidates = drop_invalid(rank(results, query), self.kind)
        return candidates[0] if candidates else None
