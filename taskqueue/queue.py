"""In-process task queue with a fixed concurrency ceiling."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Deque, Generic, Iterable, List, Set, TypeVar, Union

from taskqueue.config import QueueSettings

logger = logging.getLogger("taskqueue.queue")

T = TypeVar("T")

Task = Callable[[], Union[Awaitable[T], T]]


class InvalidConfiguration(ValueError):
    """Raised when a queue is constructed with an unusable concurrency limit."""


@dataclass
class QueueStats:
    waiting: int
    active: int
    limit: int


@dataclass
class PendingEntry(Generic[T]):
    """A submitted task waiting for a free slot, plus the future its caller holds."""

    task: Task[T]
    future: asyncio.Future


class BoundedTaskQueue:
    """Runs submitted async tasks, at most ``concurrency_limit`` at a time.

    Tasks that cannot start right away wait in a FIFO backlog and are promoted
    as running tasks settle. The future returned by :meth:`submit` carries the
    task's own result or exception, untouched.

    All bookkeeping happens on the event loop thread without awaiting, so
    admission and promotion never interleave and no lock is needed.
    """

    def __init__(self, concurrency_limit: int):
        if (
            isinstance(concurrency_limit, bool)
            or not isinstance(concurrency_limit, int)
            or concurrency_limit <= 0
        ):
            raise InvalidConfiguration(
                f"concurrency_limit must be a positive integer, got {concurrency_limit!r}"
            )
        self._limit = concurrency_limit
        self._running = 0
        self._backlog: Deque[PendingEntry[Any]] = deque()
        self._runners: Set[asyncio.Task] = set()
        self._idle = asyncio.Event()
        self._idle.set()

    @classmethod
    def from_settings(cls, settings: QueueSettings) -> "BoundedTaskQueue":
        return cls(settings.concurrency_limit)

    # ---------------------------
    # Public API
    # ---------------------------
    def submit(self, task: Task[T]) -> "asyncio.Future[T]":
        """Submit a task and return a future for its outcome.

        Must be called from a running event loop. The task starts on the next
        loop iteration if a slot is free, otherwise it joins the backlog.
        """
        loop = asyncio.get_running_loop()
        entry: PendingEntry[T] = PendingEntry(task=task, future=loop.create_future())
        self._idle.clear()
        if self._running < self._limit:
            self._admit(entry)
        else:
            self._backlog.append(entry)
            logger.debug(
                "queued task=%r waiting=%s active=%s", task, len(self._backlog), self._running
            )
        return entry.future

    def submit_many(self, tasks: Iterable[Task[T]]) -> List["asyncio.Future[T]"]:
        """Submit tasks in iteration order."""
        return [self.submit(task) for task in tasks]

    async def join(self) -> None:
        """Wait until nothing is running and the backlog is empty."""
        await self._idle.wait()

    def stats(self) -> QueueStats:
        return QueueStats(waiting=self.waiting, active=self._running, limit=self._limit)

    @property
    def concurrency_limit(self) -> int:
        return self._limit

    @property
    def active(self) -> int:
        return self._running

    @property
    def waiting(self) -> int:
        """Backlog entries that will still run; cancelled handles are not counted."""
        return sum(1 for entry in self._backlog if not entry.future.cancelled())

    def __repr__(self) -> str:
        return (
            f"BoundedTaskQueue(concurrency_limit={self._limit}, "
            f"active={self._running}, waiting={self.waiting})"
        )

    # ---------------------------
    # Internal helpers
    # ---------------------------
    def _admit(self, entry: PendingEntry[Any]) -> None:
        self._running += 1
        logger.debug("admitted task=%r active=%s limit=%s", entry.task, self._running, self._limit)
        runner = asyncio.get_running_loop().create_task(self._run(entry))
        self._runners.add(runner)
        runner.add_done_callback(self._runners.discard)

    async def _run(self, entry: PendingEntry[Any]) -> None:
        future = entry.future
        try:
            result = entry.task()
            if inspect.isawaitable(result):
                result = await result
        except asyncio.CancelledError:
            future.cancel()
            raise
        except StopIteration as exc:
            # Futures reject StopIteration.
            if not future.done():
                error = RuntimeError(f"task raised StopIteration: {exc!r}")
                error.__cause__ = exc
                future.set_exception(error)
        except BaseException as exc:
            if not future.done():
                future.set_exception(exc)
            if isinstance(exc, (KeyboardInterrupt, SystemExit)):
                raise
        else:
            if not future.done():
                future.set_result(result)
        finally:
            self._on_task_settled()

    def _on_task_settled(self) -> None:
        self._running -= 1
        # A cancelled handle in the backlog never gets a slot.
        while self._running < self._limit and self._backlog:
            entry = self._backlog.popleft()
            if entry.future.cancelled():
                logger.debug("skipped cancelled task=%r", entry.task)
                continue
            self._admit(entry)
        if self._running == 0 and not self._backlog:
            self._idle.set()
        logger.debug("settled active=%s waiting=%s", self._running, len(self._backlog))
