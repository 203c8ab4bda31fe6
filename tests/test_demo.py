import pytest

from taskqueue.demo import parse_task_spec, run_demo, run_scenario
from taskqueue.schemas import TaskSpec


@pytest.mark.asyncio
async def test_pair_scenario_overlaps_two_tasks():
    report = await run_scenario("pair")

    assert report.results == ["A", "B", "C", "D"]
    assert report.started_order() == ["A", "B", "C", "D"]
    assert report.sequential_ms == 1500
    assert 650 <= report.elapsed_ms < 1200

    # A and B start together; C takes B's slot and D takes A's.
    assert report.offset("B", "start") < 50
    assert 0 <= report.offset("C", "start") - report.offset("B", "finish") < 50
    assert 0 <= report.offset("D", "start") - report.offset("A", "finish") < 50


@pytest.mark.asyncio
async def test_serial_scenario_runs_one_at_a_time():
    report = await run_scenario("serial")

    assert report.results == ["X", "Y", "Z"]
    assert 280 <= report.elapsed_ms < 600
    kinds = [(event.label, event.kind) for event in report.events]
    assert kinds == [
        ("X", "start"),
        ("X", "finish"),
        ("Y", "start"),
        ("Y", "finish"),
        ("Z", "start"),
        ("Z", "finish"),
    ]


@pytest.mark.asyncio
async def test_limit_above_task_count_takes_longest_duration():
    specs = [TaskSpec(label=label, duration_ms=ms) for label, ms in [("a", 100), ("b", 200), ("c", 150)]]
    report = await run_demo(5, specs)

    assert report.results == ["a", "b", "c"]
    assert 190 <= report.elapsed_ms < 400
    assert all(report.offset(label, "start") < 50 for label in "abc")


@pytest.mark.asyncio
async def test_unknown_scenario_is_rejected():
    with pytest.raises(ValueError):
        await run_scenario("nope")


def test_parse_task_spec():
    spec = parse_task_spec("fetch:250")
    assert spec.label == "fetch"
    assert spec.duration_ms == 250


@pytest.mark.parametrize("text", ["fetch", "fetch:soon", ":100", "fetch:-5"])
def test_parse_task_spec_rejects_malformed(text):
    with pytest.raises(ValueError):
        parse_task_spec(text)
