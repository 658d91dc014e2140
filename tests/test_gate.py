"""Tests for the step gate's pacing and cancellation."""

from __future__ import annotations

import asyncio
import logging

import pytest

from logodbg.errors import CancellationError, StepPendingError
from logodbg.gate import StepGate
from logodbg.trace import TraceRenderer
from logodbg.values import List


@pytest.mark.asyncio
async def test_step_resolves_after_interval_and_retracts_hook():
    gate = StepGate(interval=0.01)
    loop = asyncio.get_running_loop()
    started = loop.time()
    pending = gate.step("forward", [50])
    assert gate.pending is pending
    assert not pending.done()
    await pending
    assert loop.time() - started >= 0.005
    assert pending.done()
    assert gate.pending is None
    assert gate.steps == 1


@pytest.mark.asyncio
async def test_overlapping_step_is_rejected():
    gate = StepGate(interval=5)
    first = gate.step("forward", [1])
    with pytest.raises(StepPendingError):
        gate.step("right", [90])
    assert gate.pending is first
    assert gate.cancel("cleanup") is True
    with pytest.raises(CancellationError):
        await first


@pytest.mark.asyncio
async def test_cancel_before_elapse_rejects_with_reason():
    gate = StepGate(interval=5)
    pending = gate.step("forward", [50])
    asyncio.get_running_loop().call_later(0.01, gate.cancel, "halt")
    with pytest.raises(CancellationError) as info:
        await pending
    assert info.value.reason == "halt"
    assert gate.pending is None


@pytest.mark.asyncio
async def test_cancel_without_pending_step_has_no_effect():
    gate = StepGate(interval=0.01)
    assert gate.cancel("early") is False
    await gate.step("forward", [10])


@pytest.mark.asyncio
async def test_late_cancel_cannot_reach_a_later_step():
    gate = StepGate(interval=0.01)
    first = gate.step("forward", [10])
    await first
    assert gate.cancel("late") is False
    assert first.cancel("late") is False
    await gate.step("right", [90])


@pytest.mark.asyncio
async def test_interleaved_steps_never_overlap():
    gate = StepGate(interval=0.01)
    outcomes = []
    for idx in range(6):
        pending = gate.step("forward", [idx])
        assert gate.pending is pending
        if idx % 2:
            gate.cancel(f"stop {idx}")
            assert gate.pending is None
        try:
            await pending
            outcomes.append("ok")
        except CancellationError as exc:
            outcomes.append(exc.reason)
        assert gate.pending is None
        gate.cancel("between steps")
    assert outcomes == ["ok", "stop 1", "ok", "stop 3", "ok", "stop 5"]


@pytest.mark.asyncio
async def test_step_updates_trace_before_waiting():
    renderer = TraceRenderer()
    gate = StepGate(renderer, interval=0.01)
    body = List.of("forward", 50, "right", 90)
    node = list(body.cells())[2]
    pending = gate.step("right", [90], body, node)
    assert renderer.body is body
    assert renderer.active is renderer.lookup(node)
    assert renderer.active.text == "right"
    await pending


@pytest.mark.asyncio
async def test_step_without_position_skips_trace_update():
    renderer = TraceRenderer()
    gate = StepGate(renderer, interval=0.0)
    body = List.of("forward", 50)
    await gate.step("template", [], None, None)
    await gate.step("template", [], body, None)
    assert renderer.body is None
    assert len(renderer) == 0
    assert renderer.view.root is None


@pytest.mark.asyncio
async def test_listeners_see_each_step_and_failures_are_logged(caplog):
    gate = StepGate(interval=0.0)
    events = []

    def broken(event):
        raise RuntimeError("listener bug")

    gate.add_listener(broken)
    gate.add_listener(events.append)
    with caplog.at_level(logging.ERROR, logger="logodbg.gate"):
        await gate.step("forward", ["50"])
    gate.remove_listener(broken)
    gate.remove_listener(broken)
    await gate.step(None, [])
    assert [(e.seq, e.name, e.args) for e in events] == [(1, "forward", ("50",)), (2, "", ())]
    assert "step listener failed" in caplog.text


@pytest.mark.asyncio
async def test_task_cancellation_retracts_pending_step():
    gate = StepGate(interval=5)

    async def waiter():
        await gate.step("forward", [10])

    task = asyncio.ensure_future(waiter())
    await asyncio.sleep(0)
    assert gate.pending is not None
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert gate.pending is None
    await asyncio.wait_for(asyncio.ensure_future(_quick_step(gate)), timeout=1)


async def _quick_step(gate):
    gate.interval = 0.0
    await gate.step("right", [90])


def test_negative_interval_is_rejected():
    with pytest.raises(ValueError):
        StepGate(interval=-1)
