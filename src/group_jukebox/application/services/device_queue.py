"""Per-device sequential operation queue.

All mutations of one playback device go through a single worker task, so two
commands issued close together can no longer interleave their device calls.

An operation has two phases. The *synchronous* phase (inspect state, clear,
enqueue) produces the value the caller is waiting for; the caller is resumed
as soon as it finishes. The optional *continuation* (activation nudges, play)
then runs on the same worker before the next job starts, so the next request
never observes a half-activated device. The caller receives a future for the
continuation that always resolves to ``None``: continuation failures are
logged here and never reach the caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from ...domain.shared.exceptions import DeviceBusyError
from ...domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

T = TypeVar("T")

Continuation = Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class PhaseResult(Generic[T]):
    """Outcome of a synchronous phase plus the work left for the background."""

    value: T
    continuation: Continuation | None = None


@dataclass
class _Job(Generic[T]):
    label: str
    operation: Callable[[], Awaitable[PhaseResult[T]]]
    future: asyncio.Future[tuple[T, asyncio.Future[None] | None]] = field(repr=False)


class DeviceOperationQueue(Generic[T]):
    """Single-worker FIFO of device operations."""

    def __init__(self, device_name: str, *, max_pending: int = 32) -> None:
        self._device_name = device_name
        self._max_pending = max_pending
        self._queue: asyncio.Queue[_Job[T]] = asyncio.Queue()
        self._worker: asyncio.Task[None] | None = None
        self._closed = False
        self._busy = False

    @property
    def device_name(self) -> str:
        return self._device_name

    @property
    def pending(self) -> int:
        """Jobs waiting behind the one currently running."""
        return self._queue.qsize()

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    @property
    def is_closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        if self.is_running:
            return
        self._worker = asyncio.create_task(
            self._run(), name=f"device-queue:{self._device_name}"
        )
        logger.debug(LogTemplates.DEVICE_QUEUE_STARTED, self._device_name)

    async def submit(
        self, label: str, operation: Callable[[], Awaitable[PhaseResult[T]]]
    ) -> tuple[T, asyncio.Future[None] | None]:
        """Run *operation* once every earlier job (and its continuation) is done.

        Returns the synchronous phase's value and, if the operation left work
        for the background, a future that resolves when that work finishes.

        Raises:
            DeviceBusyError: if ``max_pending`` jobs are already waiting.
            RuntimeError: if the queue has been closed.
            Exception: whatever the synchronous phase raised.
        """
        if self._closed:
            raise RuntimeError(ErrorMessages.DEVICE_QUEUE_CLOSED.format(device=self._device_name))
        if self._queue.qsize() >= self._max_pending:
            raise DeviceBusyError(self._device_name, self._queue.qsize())

        self.start()
        loop = asyncio.get_running_loop()
        job: _Job[T] = _Job(label=label, operation=operation, future=loop.create_future())

        waiting = self._queue.qsize() + (1 if self._busy else 0)
        if waiting:
            logger.debug(LogTemplates.DEVICE_QUEUE_WAITING, label, self._device_name, waiting)

        await self._queue.put(job)
        return await job.future

    async def join(self) -> None:
        """Wait until every submitted job, continuations included, has finished."""
        await self._queue.join()

    async def close(self) -> None:
        self._closed = True

        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None

        dropped = 0
        while not self._queue.empty():
            job = self._queue.get_nowait()
            if not job.future.done():
                job.future.cancel()
            self._queue.task_done()
            dropped += 1

        logger.info(LogTemplates.DEVICE_QUEUE_CLOSED, self._device_name, dropped)

    async def _run(self) -> None:
        while True:
            job = await self._queue.get()
            self._busy = True
            try:
                await self._process(job)
            finally:
                self._busy = False
                self._queue.task_done()

    async def _process(self, job: _Job[T]) -> None:
        if job.future.cancelled():
            return

        try:
            result = await job.operation()
        except asyncio.CancelledError:
            # close() while the synchronous phase was running
            if not job.future.done():
                job.future.cancel()
            raise
        except Exception as exc:
            logger.debug(LogTemplates.DEVICE_QUEUE_JOB_FAILED, job.label, self._device_name)
            if not job.future.done():
                job.future.set_exception(exc)
            return

        background: asyncio.Future[None] | None = None
        if result.continuation is not None:
            background = asyncio.get_running_loop().create_future()

        if not job.future.done():
            job.future.set_result((result.value, background))

        if result.continuation is not None and background is not None:
            await self._supervise(job.label, result.continuation, background)

    async def _supervise(
        self, label: str, continuation: Continuation, background: asyncio.Future[None]
    ) -> None:
        try:
            await continuation()
        except Exception:
            logger.exception(LogTemplates.BACKGROUND_FAILED, label)
        finally:
            if not background.done():
                background.set_result(None)
