"""Timed demo runs of the bounded task queue."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from taskqueue.queue import BoundedTaskQueue
from taskqueue.schemas import DemoReport, TaskEvent, TaskSpec

logger = logging.getLogger("taskqueue.demo")

SCENARIOS: Dict[str, Tuple[int, List[TaskSpec]]] = {
    "pair": (
        2,
        [
            TaskSpec(label="A", duration_ms=600),
            TaskSpec(label="B", duration_ms=300),
            TaskSpec(label="C", duration_ms=400),
            TaskSpec(label="D", duration_ms=200),
        ],
    ),
    "serial": (
        1,
        [
            TaskSpec(label="X", duration_ms=100),
            TaskSpec(label="Y", duration_ms=100),
            TaskSpec(label="Z", duration_ms=100),
        ],
    ),
}


class Timeline:
    """Collects start/finish events relative to when it was created."""

    def __init__(self) -> None:
        self.started = time.perf_counter()
        self.events: List[TaskEvent] = []

    def record(self, label: str, kind: str) -> None:
        offset_ms = (time.perf_counter() - self.started) * 1000.0
        self.events.append(TaskEvent(label=label, kind=kind, offset_ms=offset_ms))
        logger.info("%s %s at %.1fms", kind, label, offset_ms)

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started) * 1000.0


def delayed_task(
    ms: int, label: str, timeline: Optional[Timeline] = None
) -> Callable[[], Awaitable[str]]:
    """Build a task that sleeps ``ms`` milliseconds and returns ``label``."""

    async def _task() -> str:
        if timeline is not None:
            timeline.record(label, "start")
        await asyncio.sleep(ms / 1000.0)
        if timeline is not None:
            timeline.record(label, "finish")
        return label

    return _task


async def run_demo(concurrency_limit: int, specs: Sequence[TaskSpec]) -> DemoReport:
    """Submit ``specs`` in order to a fresh queue and report how they ran."""
    queue = BoundedTaskQueue(concurrency_limit)
    timeline = Timeline()
    handles = queue.submit_many(
        delayed_task(spec.duration_ms, spec.label, timeline) for spec in specs
    )
    results = list(await asyncio.gather(*handles))
    report = DemoReport(
        concurrency_limit=concurrency_limit,
        results=results,
        elapsed_ms=timeline.elapsed_ms(),
        sequential_ms=sum(spec.duration_ms for spec in specs),
        events=timeline.events,
    )
    logger.info(
        "demo completed limit=%s tasks=%s elapsed_ms=%.2f sequential_ms=%s",
        concurrency_limit,
        len(specs),
        report.elapsed_ms,
        report.sequential_ms,
    )
    return report


async def run_scenario(name: str) -> DemoReport:
    try:
        limit, specs = SCENARIOS[name]
    except KeyError as exc:
        raise ValueError(f"Unknown scenario: {name}") from exc
    return await run_demo(limit, specs)


def parse_task_spec(text: str) -> TaskSpec:
    """Parse ``LABEL:MS`` into a :class:`TaskSpec`."""
    label, sep, ms = text.rpartition(":")
    if not sep:
        raise ValueError(f"Expected LABEL:MS, got {text!r}")
    try:
        duration_ms = int(ms)
    except ValueError as exc:
        raise ValueError(f"Duration must be an integer in {text!r}") from exc
    return TaskSpec(label=label, duration_ms=duration_ms)
