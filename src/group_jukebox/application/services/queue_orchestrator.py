"""Queue Orchestrator - mutates the device queue in response to add commands.

Every request runs as one job on the device's :class:`DeviceOperationQueue`:

* the synchronous phase inspects the device, decides, clears and enqueues,
  and produces the outcome the user sees;
* the continuation (queue activation, resume, delayed play) runs after the
  user has been answered and never changes that answer.

Only the enqueue of the requested item is a hard failure. Stop, flush, seek,
skip and play are best-effort nudges; their failures are logged and ignored.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from functools import partial
from typing import TYPE_CHECKING, TypeVar

from ...domain.catalog.blacklist import (
    BlacklistPartition,
    BlacklistPredicate,
    allow_everything,
    partition,
)
from ...domain.catalog.entities import CatalogItem
from ...domain.device.duplicates import DuplicateMatch, find_duplicate
from ...domain.device.value_objects import DeviceState, QueueSnapshot
from ...domain.shared.events import (
    PlaybackActivated,
    QueueFlushed,
    RegionUnavailable,
    TracksEnqueued,
)
from ...domain.shared.exceptions import DeviceBusyError, DeviceError
from ...domain.shared.messages import ErrorMessages, LogTemplates, UserMessages
from .device_queue import Continuation, DeviceOperationQueue, PhaseResult
from .orchestration_models import (
    BatchOrchestrationRequest,
    OrchestrationMode,
    OrchestrationOutcome,
    OrchestrationRequest,
    OrchestrationStatus,
)

if TYPE_CHECKING:
    from ...config.settings import OrchestrationSettings
    from ...domain.shared.events import DomainEvent, EventBus
    from ..interfaces.playback_device import PlaybackDevice

logger = logging.getLogger(__name__)

R = TypeVar("R")


class QueueOrchestrator:
    """Decides how to add catalog items to one playback device's queue."""

    def __init__(
        self,
        *,
        device: PlaybackDevice,
        settings: OrchestrationSettings,
        is_blacklisted: BlacklistPredicate = allow_everything,
        event_bus: EventBus | None = None,
        operation_queue: DeviceOperationQueue[OrchestrationOutcome] | None = None,
    ) -> None:
        self._device = device
        self._settings = settings
        self._is_blacklisted = is_blacklisted
        self._event_bus = event_bus
        self._queue = operation_queue or DeviceOperationQueue(
            device.name, max_pending=settings.max_pending_operations
        )

    @property
    def device_name(self) -> str:
        return self._device.name

    @property
    def operation_queue(self) -> DeviceOperationQueue[OrchestrationOutcome]:
        return self._queue

    async def close(self) -> None:
        await self._queue.close()

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    async def orchestrate(self, request: OrchestrationRequest) -> OrchestrationOutcome:
        """Add a single track, replacing a stopped queue or appending to a live one."""
        item = request.item

        if self._is_blacklisted(item.name, item.artist):
            logger.info(LogTemplates.BLACKLIST_BLOCKED, item.name, item.artist)
            return OrchestrationOutcome.refused(
                OrchestrationStatus.BLACKLISTED,
                UserMessages.TRACK_BLACKLISTED.format(name=item.name, artist=item.artist),
                item=item,
            )

        if request.mode is OrchestrationMode.APPEND:
            operation = partial(self._run_append, request)
        else:
            operation = partial(self._run_replace, request)

        return await self._submit(f"{request.mode} {item.name}", item, operation)

    async def orchestrate_batch(self, request: BatchOrchestrationRequest) -> OrchestrationOutcome:
        """Add an album or playlist after removing blacklisted tracks."""
        source = request.source
        split = partition(request.tracks, self._is_blacklisted)

        if split.all_blocked:
            logger.info(LogTemplates.BLACKLIST_BLOCKED, source.name, source.artist)
            return OrchestrationOutcome.refused(
                OrchestrationStatus.BLACKLISTED,
                UserMessages.ALL_BLACKLISTED.format(
                    kind=source.kind, name=source.name, count=split.total
                ),
                item=source,
                blocked=split.blocked,
            )

        if split.has_blocked:
            logger.info(LogTemplates.BLACKLIST_PARTITIONED, len(split.blocked), source.name)

        return await self._submit(
            f"{request.mode} {source.kind} {source.name}",
            source,
            partial(self._run_batch, request, split),
        )

    async def _submit(
        self,
        label: str,
        item: CatalogItem,
        operation: Callable[[], Awaitable[PhaseResult[OrchestrationOutcome]]],
    ) -> OrchestrationOutcome:
        try:
            outcome, background = await self._queue.submit(label, operation)
        except DeviceBusyError as exc:
            logger.warning("%s", exc.message)
            return OrchestrationOutcome.refused(
                OrchestrationStatus.DEVICE_BUSY, UserMessages.DEVICE_BUSY, item=item
            )
        return outcome.with_background(background)

    # ------------------------------------------------------------------
    # Synchronous phases
    # ------------------------------------------------------------------

    async def _run_replace(self, request: OrchestrationRequest) -> PhaseResult[OrchestrationOutcome]:
        item = request.item
        state, snapshot = await self._inspect()
        logger.info(
            LogTemplates.ORCHESTRATION_STARTED,
            request.mode,
            item.name,
            state,
            len(snapshot) if snapshot is not None else "?",
        )

        if state.allows_clearing:
            await self._clear_queue()
        else:
            duplicate = self._check_duplicate(snapshot, item)
            if duplicate is not None:
                return PhaseResult(duplicate)

        failure = await self._enqueue(item, request.channel)
        if failure is not None:
            return PhaseResult(failure)

        await self._publish_enqueued(item, request.mode, queued=1, failed=0)
        outcome = OrchestrationOutcome.queued(
            item, UserMessages.ADDED.format(name=item.name, artist=item.artist)
        )

        continuation: Continuation | None = None
        if state is DeviceState.STOPPED:
            continuation = partial(self._activate_queue, item)
        elif state is DeviceState.PAUSED:
            continuation = self._resume
        return PhaseResult(outcome, continuation)

    async def _run_append(self, request: OrchestrationRequest) -> PhaseResult[OrchestrationOutcome]:
        item = request.item
        snapshot = await self._snapshot()

        duplicate = self._check_duplicate(snapshot, item)
        if duplicate is not None:
            return PhaseResult(duplicate)

        failure = await self._enqueue(item, request.channel)
        if failure is not None:
            return PhaseResult(failure)

        await self._publish_enqueued(item, request.mode, queued=1, failed=0)
        message = UserMessages.APPENDED.format(name=item.name, artist=item.artist)

        continuation: Continuation | None = None
        try:
            state = DeviceState.parse(await self._call("get_state", self._device.get_state))
        except DeviceError as exc:
            logger.warning(LogTemplates.ORCHESTRATION_STATE_CHECK_FAILED, exc)
        else:
            logger.info(LogTemplates.ORCHESTRATION_STATE_AFTER_APPEND, state)
            if not state.is_active:
                message += UserMessages.APPENDED_STARTING
                continuation = partial(self._play_after, self._settings.append_play_delay_s)

        return PhaseResult(OrchestrationOutcome.queued(item, message), continuation)

    async def _run_batch(
        self, request: BatchOrchestrationRequest, split: BlacklistPartition
    ) -> PhaseResult[OrchestrationOutcome]:
        source = request.source
        state = await self._read_state()
        logger.info(LogTemplates.ORCHESTRATION_STARTED, request.mode, source.name, state, "?")

        if request.mode is OrchestrationMode.REPLACE and state.allows_clearing:
            await self._clear_queue()

        if split.has_blocked:
            queued, failed = await self._enqueue_many(split.allowed)
            logger.info(
                LogTemplates.ORCHESTRATION_BATCH_ENQUEUED,
                queued,
                len(split.allowed),
                source.name,
                failed,
            )
            if queued == 0:
                return PhaseResult(
                    OrchestrationOutcome.refused(
                        OrchestrationStatus.ENQUEUE_FAILED,
                        UserMessages.BATCH_FAILED.format(name=source.name),
                        item=source,
                        failed_count=failed,
                        blocked=split.blocked,
                    )
                )
            what = f"{queued} tracks from {source.kind}"
        else:
            # Nothing to filter: let the device expand the whole collection.
            failure = await self._enqueue(source, request.channel)
            if failure is not None:
                return PhaseResult(failure)
            queued, failed = len(request.tracks), 0
            what = str(source.kind)

        await self._publish_enqueued(source, request.mode, queued=queued, failed=failed)

        message = UserMessages.ADDED_BATCH.format(what=what, name=source.name, artist=source.artist)
        if failed:
            message += UserMessages.BATCH_PARTIAL.format(count=failed)
        message += split.skipped_summary(self._settings.skipped_display_limit)

        outcome = OrchestrationOutcome.queued(
            source, message, queued_count=queued, failed_count=failed, blocked=split.blocked
        )

        continuation: Continuation | None = None
        if request.mode is OrchestrationMode.REPLACE and state is DeviceState.STOPPED:
            continuation = partial(self._activate_queue, source)
        elif not state.is_active:
            continuation = partial(self._play_after, 0.0)
        return PhaseResult(outcome, continuation)

    # ------------------------------------------------------------------
    # Synchronous-phase helpers
    # ------------------------------------------------------------------

    async def _inspect(self) -> tuple[DeviceState, QueueSnapshot | None]:
        """Fetch state and queue concurrently; neither failure is fatal."""
        raw_state, raw_items = await asyncio.gather(
            self._call("get_state", self._device.get_state),
            self._call("get_queue", self._device.get_queue),
            return_exceptions=True,
        )

        if isinstance(raw_state, BaseException):
            if not isinstance(raw_state, DeviceError):
                raise raw_state
            logger.warning(LogTemplates.ORCHESTRATION_STATE_CHECK_FAILED, raw_state)
            state = DeviceState.UNKNOWN
        else:
            state = self._normalise_state(raw_state)

        if isinstance(raw_items, BaseException):
            if not isinstance(raw_items, DeviceError):
                raise raw_items
            logger.warning(LogTemplates.ORCHESTRATION_SNAPSHOT_FAILED, raw_items)
            snapshot = None
        else:
            snapshot = QueueSnapshot.of(raw_items)

        return state, snapshot

    async def _read_state(self) -> DeviceState:
        try:
            raw = await self._call("get_state", self._device.get_state)
        except DeviceError as exc:
            logger.warning(LogTemplates.ORCHESTRATION_STATE_CHECK_FAILED, exc)
            return DeviceState.UNKNOWN
        return self._normalise_state(raw)

    async def _snapshot(self) -> QueueSnapshot | None:
        try:
            return QueueSnapshot.of(await self._call("get_queue", self._device.get_queue))
        except DeviceError as exc:
            logger.warning(LogTemplates.ORCHESTRATION_SNAPSHOT_FAILED, exc)
            return None

    @staticmethod
    def _normalise_state(raw: object) -> DeviceState:
        state = DeviceState.parse(raw)
        if state is DeviceState.UNKNOWN:
            logger.info(LogTemplates.ORCHESTRATION_STATE_RAW, raw, state)
        return state

    def _check_duplicate(
        self, snapshot: QueueSnapshot | None, item: CatalogItem
    ) -> OrchestrationOutcome | None:
        match: DuplicateMatch | None = find_duplicate(
            snapshot.items if snapshot is not None else None, item
        )
        if match is None:
            return None

        logger.info(LogTemplates.ORCHESTRATION_DUPLICATE, item.name, match.position, match.matched_by)
        return OrchestrationOutcome.refused(
            OrchestrationStatus.DUPLICATE,
            UserMessages.DUPLICATE.format(name=item.name, artist=item.artist, position=match.position),
            item=item,
            duplicate_position=match.position,
        )

    async def _clear_queue(self) -> None:
        """Stop so the queue becomes the active source, then flush it."""
        logger.info(LogTemplates.ORCHESTRATION_CLEARING)
        await self._best_effort("stop", self._device.stop)
        await asyncio.sleep(self._settings.settle_delay_s)

        try:
            await self._call("flush_queue", self._device.flush_queue)
        except DeviceError as exc:
            logger.warning(LogTemplates.ORCHESTRATION_FLUSH_FAILED, exc)
        else:
            logger.info(LogTemplates.ORCHESTRATION_FLUSHED)
            await self._publish(QueueFlushed(device_name=self.device_name))

        await asyncio.sleep(self._settings.settle_delay_s)

    async def _enqueue(self, item: CatalogItem, channel: str | None) -> OrchestrationOutcome | None:
        """Enqueue *item*; return a refusal outcome on failure, None on success."""
        try:
            await self._call("enqueue", partial(self._device.enqueue, item.uri))
        except DeviceError as exc:
            logger.warning(
                LogTemplates.ORCHESTRATION_ENQUEUE_FAILED, item.name, exc.message, exc.device_code
            )
            if exc.is_region_unavailable:
                await self._publish(
                    RegionUnavailable(
                        device_name=self.device_name,
                        item_uri=item.uri,
                        item_name=item.name,
                        item_artist=item.artist,
                        origin_channel=channel,
                    )
                )
                return OrchestrationOutcome.refused(
                    OrchestrationStatus.REGION_UNAVAILABLE, UserMessages.REGION_UNAVAILABLE, item=item
                )
            if item.kind.is_collection:
                message = UserMessages.BATCH_FAILED.format(name=item.name)
            else:
                message = UserMessages.ADD_FAILED
            return OrchestrationOutcome.refused(
                OrchestrationStatus.ENQUEUE_FAILED, message, item=item, failed_count=1
            )

        logger.info(LogTemplates.ORCHESTRATION_ENQUEUED, item.name, item.uri)
        return None

    async def _enqueue_many(self, tracks: list[CatalogItem]) -> tuple[int, int]:
        """Enqueue *tracks* concurrently and wait for all of them to settle."""

        async def enqueue_one(track: CatalogItem) -> bool:
            try:
                await self._call("enqueue", partial(self._device.enqueue, track.uri))
            except DeviceError as exc:
                logger.warning(LogTemplates.ORCHESTRATION_BATCH_TRACK_FAILED, track.name, exc)
                return False
            return True

        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(enqueue_one(track)) for track in tracks]

        queued = sum(1 for task in tasks if task.result())
        return queued, len(tasks) - queued

    # ------------------------------------------------------------------
    # Background continuations
    # ------------------------------------------------------------------

    async def _activate_queue(self, source: CatalogItem) -> None:
        """Make a freshly filled queue the active source and start it."""
        delay = self._settings.activation_delay_s

        await self._best_effort("stop", self._device.stop)
        await asyncio.sleep(delay)

        ready = await self._wait_for_queue()

        if await self._best_effort("seek_to_first", self._device.seek_to_first):
            logger.info(LogTemplates.ACTIVATION_SEEK_OK)
        elif await self._best_effort("skip_next", self._device.skip_next):
            logger.info(LogTemplates.ACTIVATION_NEXT_OK)
        else:
            logger.warning(LogTemplates.ACTIVATION_FAILED)

        await asyncio.sleep(delay)
        if await self._start_playback():
            logger.info(LogTemplates.PLAYBACK_STARTED)

        await self._publish(
            PlaybackActivated(device_name=self.device_name, source_uri=source.uri, queue_ready=ready)
        )

    async def _wait_for_queue(self) -> bool:
        attempts = self._settings.poll_attempts
        for attempt in range(1, attempts + 1):
            try:
                items = await self._call("get_queue", self._device.get_queue)
            except DeviceError as exc:
                logger.debug(LogTemplates.BEST_EFFORT_FAILED, "get_queue", exc)
            else:
                if items:
                    logger.info(LogTemplates.QUEUE_READY, len(items))
                    return True
                logger.debug(LogTemplates.QUEUE_NOT_READY, attempt, attempts)
            if attempt < attempts:
                await asyncio.sleep(self._settings.poll_interval_s)

        logger.warning(LogTemplates.QUEUE_NEVER_READY, attempts)
        return False

    async def _resume(self) -> None:
        if await self._start_playback():
            logger.info(LogTemplates.PLAYBACK_RESUMED)

    async def _play_after(self, delay: float) -> None:
        if delay:
            await asyncio.sleep(delay)
        if await self._start_playback():
            logger.info(LogTemplates.PLAYBACK_STARTED)

    async def _start_playback(self) -> bool:
        try:
            await self._call("play", self._device.play)
        except DeviceError as exc:
            logger.warning(LogTemplates.PLAYBACK_START_FAILED, exc)
            return False
        return True

    # ------------------------------------------------------------------
    # Device call plumbing
    # ------------------------------------------------------------------

    async def _call(self, operation: str, fn: Callable[[], Awaitable[R]]) -> R:
        """Run one device call under the configured timeout.

        Any failure surfaces as :class:`DeviceError` so callers need to handle
        exactly one exception type.
        """
        timeout = self._settings.device_call_timeout_s
        try:
            async with asyncio.timeout(timeout):
                return await fn()
        except DeviceError:
            raise
        except TimeoutError as exc:
            raise DeviceError(
                operation,
                ErrorMessages.DEVICE_CALL_TIMEOUT.format(operation=operation, timeout=timeout),
            ) from exc
        except Exception as exc:
            raise DeviceError(operation, str(exc) or repr(exc)) from exc

    async def _best_effort(self, operation: str, fn: Callable[[], Awaitable[object]]) -> bool:
        try:
            await self._call(operation, fn)
        except DeviceError as exc:
            logger.debug(LogTemplates.BEST_EFFORT_FAILED, operation, exc)
            return False
        return True

    async def _publish(self, event: DomainEvent) -> None:
        if self._event_bus is not None:
            await self._event_bus.publish(event)

    async def _publish_enqueued(
        self, item: CatalogItem, mode: OrchestrationMode, *, queued: int, failed: int
    ) -> None:
        await self._publish(
            TracksEnqueued(
                device_name=self.device_name,
                source_uri=item.uri,
                source_name=item.name,
                mode=str(mode),
                queued_count=queued,
                failed_count=failed,
            )
        )
