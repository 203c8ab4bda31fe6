"""Entrypoint script to run a timed demo of the bounded task queue."""

from __future__ import annotations

import argparse
import asyncio
from typing import Optional, Sequence

from taskqueue.config import QueueSettings
from taskqueue.demo import SCENARIOS, parse_task_spec, run_demo, run_scenario
from taskqueue.schemas import DemoReport


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a bounded task queue demo.")
    parser.add_argument(
        "--scenario",
        choices=sorted(SCENARIOS),
        default=None,
        help="Built-in scenario to run (default: pair unless --task is given).",
    )
    parser.add_argument(
        "--limit", type=int, default=None, help="Concurrency limit (default from settings)."
    )
    parser.add_argument(
        "--task",
        dest="tasks",
        action="append",
        type=parse_task_spec,
        default=[],
        metavar="LABEL:MS",
        help="Task to submit; repeat in submission order.",
    )
    parser.add_argument("--json", action="store_true", help="Print the report as JSON.")
    args = parser.parse_args(argv)
    if args.limit is not None:
        if args.limit <= 0:
            parser.error("--limit must be a positive integer")
        if not args.tasks or args.scenario is not None:
            parser.error("--limit only applies to --task runs, not built-in scenarios")
    return args


def print_report(report: DemoReport) -> None:
    print(f"Concurrency limit: {report.concurrency_limit}")
    for event in report.events:
        print(f"  [{event.offset_ms:8.1f}ms] {event.kind:<6} {event.label}")
    print(f"Results: [{', '.join(report.results)}]")
    print(f"All done in {report.elapsed_ms:.0f}ms (sequential would take {report.sequential_ms}ms)")


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    settings = QueueSettings()
    settings.configure_logging()

    if args.tasks and args.scenario is None:
        limit = args.limit if args.limit is not None else settings.concurrency_limit
        report = asyncio.run(run_demo(limit, args.tasks))
    else:
        report = asyncio.run(run_scenario(args.scenario or "pair"))

    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        print_report(report)


if __name__ == "__main__":
    main()
