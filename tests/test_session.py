"""Tests for the execution session lifecycle."""

from __future__ import annotations

import asyncio

import pytest

from logodbg.context import HostContext
from logodbg.errors import CancellationError, InterpreterError, SessionBusyError, ValidationError
from logodbg.session import ExecutionSession, SessionConfig, SessionStatus

from tests.stubs import LogoRuntimeError, WordInterpreter, WrappingInterpreter


@pytest.mark.asyncio
async def test_program_is_paced_call_by_call(interpreter, ctx):
    session = ExecutionSession(interpreter, ctx, config=SessionConfig(pacing_interval=0.1))
    events = []
    active = []

    def on_step(event):
        events.append(event)
        active.append(session.renderer.active.text)

    session.add_step_listener(on_step)
    loop = asyncio.get_running_loop()
    started = loop.time()
    await session.start("forward 50 right 90 forward 50")
    elapsed = loop.time() - started

    assert [event.name for event in events] == ["forward", "right", "forward"]
    assert [event.seq for event in events] == [1, 2, 3]
    assert active == ["forward", "right", "forward"]
    assert all(b.ts - a.ts >= 0.08 for a, b in zip(events, events[1:]))
    assert elapsed >= 0.28
    assert ctx.turtle.heading == 90
    assert ctx.turtle.position == pytest.approx((50.0, 50.0))
    assert session.state.status is SessionStatus.COMPLETED
    assert session.state.steps == 3
    assert session.state.error is None


@pytest.mark.asyncio
async def test_cancel_during_wait_stops_remaining_calls(interpreter, ctx):
    session = ExecutionSession(interpreter, ctx, config=SessionConfig(pacing_interval=0.05))

    def on_step(event):
        if event.seq == 2:
            asyncio.get_running_loop().call_soon(session.cancel, "halt")

    session.add_step_listener(on_step)
    with pytest.raises(CancellationError) as info:
        await session.start("forward 50 right 90 forward 50")
    assert info.value.reason == "halt"
    assert interpreter.calls == [("forward", ["50"])]
    assert ctx.turtle.position == (0.0, 50.0)
    assert ctx.turtle.heading == 0
    assert session.state.status is SessionStatus.FAILED
    assert session.state.error is info.value
    assert session.gate.pending is None


@pytest.mark.asyncio
async def test_cancel_between_steps_is_deferred_to_next_call(interpreter, session, ctx):
    async def halt():
        session.cancel("from handler")

    interpreter.bind_values({"halt": halt})
    with pytest.raises(CancellationError, match="from handler"):
        await session.start("halt forward 10")
    assert interpreter.calls == [("halt", [])]
    assert ctx.turtle.position == (0.0, 0.0)
    assert session.state.steps == 2


@pytest.mark.asyncio
async def test_cancel_from_last_call_lets_the_run_complete(interpreter, session, ctx):
    async def halt():
        session.cancel("late")

    interpreter.bind_values({"halt": halt})
    await session.start("forward 10 halt")
    assert session.state.status is SessionStatus.COMPLETED
    assert session.state.cancel_reason == "late"
    assert session.state.error is None
    assert session.gate.pending is None
    assert interpreter.calls == [("forward", ["10"]), ("halt", [])]
    assert ctx.turtle.position == (0.0, 10.0)


@pytest.mark.asyncio
async def test_second_cancel_has_no_additional_effect(interpreter, session):
    def on_step(event):
        session.cancel("first")
        session.cancel("second")
        assert session.state.status is SessionStatus.CANCELING

    session.add_step_listener(on_step)
    with pytest.raises(CancellationError) as info:
        await session.start("forward 10 forward 10")
    assert info.value.reason == "first"
    assert session.state.cancel_reason == "first"
    assert interpreter.calls == []
    session.cancel("after the fact")
    assert session.state.status is SessionStatus.FAILED


@pytest.mark.asyncio
async def test_cancel_while_idle_is_a_noop(session, ctx):
    session.cancel("too early")
    assert session.state.status is SessionStatus.IDLE
    await session.start("forward 10")
    assert session.state.status is SessionStatus.COMPLETED
    assert ctx.turtle.position == (0.0, 10.0)


@pytest.mark.asyncio
async def test_interpreter_break_routes_into_cancellation(interpreter, session):
    def on_step(event):
        asyncio.get_running_loop().call_soon(interpreter.request_break, "user break")

    session.add_step_listener(on_step)
    with pytest.raises(CancellationError) as info:
        await session.start("forward 10 forward 10")
    assert info.value.reason == "user break"
    assert interpreter.calls == []


@pytest.mark.asyncio
async def test_only_one_run_at_a_time(session):
    task = session.start("forward 10")
    assert session.active
    with pytest.raises(SessionBusyError):
        session.start("forward 20")
    await task
    assert not session.active
    await session.run("right 90")
    assert session.state.run_id == 2


@pytest.mark.asyncio
async def test_program_errors_are_wrapped(session):
    with pytest.raises(InterpreterError) as info:
        await session.start("forward 10 jump 5")
    assert isinstance(info.value.cause, LogoRuntimeError)
    assert info.value.__cause__ is info.value.cause
    assert session.state.status is SessionStatus.FAILED
    assert session.state.error is info.value.cause


@pytest.mark.asyncio
async def test_validation_errors_surface_as_program_errors(session):
    with pytest.raises(InterpreterError) as info:
        await session.start("setpos 5")
    assert isinstance(info.value.cause, ValidationError)
    assert str(info.value.cause) == "list must be a list"


@pytest.mark.asyncio
async def test_cancellation_wrapped_by_interpreter_is_unwrapped(ctx):
    interpreter = WrappingInterpreter()
    session = ExecutionSession(interpreter, ctx, config=SessionConfig(pacing_interval=5))
    session.add_step_listener(lambda event: asyncio.get_running_loop().call_soon(session.cancel, "wrapped"))
    with pytest.raises(CancellationError) as info:
        await session.start("forward 10")
    assert info.value.reason == "wrapped"
    assert isinstance(info.value.__cause__, LogoRuntimeError)


@pytest.mark.asyncio
async def test_commands_are_bound_once_and_reused(interpreter, session):
    await session.run("forward 10")
    await session.run("forward 10")
    assert interpreter.bind_count == 1
    assert session.ctx.turtle.position == (0.0, 20.0)
    assert interpreter.oncall == session._on_call
    assert interpreter.onbreak == session.cancel


@pytest.mark.asyncio
async def test_finished_run_releases_interpreter_nodes(session, ctx):
    await session.run("forward 10 right 90")
    assert session.renderer.body is None
    assert len(session.renderer) == 0
    assert ctx.debug_view.to_text() == "[forward 10 right 90]"


@pytest.mark.asyncio
async def test_trace_can_be_disabled(interpreter):
    ctx = HostContext()
    session = ExecutionSession(interpreter, ctx, config=SessionConfig(pacing_interval=0.0, trace=False))
    await session.run("forward 10")
    assert ctx.debug_view.root is None
    assert session.state.steps == 1


@pytest.mark.asyncio
async def test_interval_can_be_changed_between_runs(session):
    session.interval = 0.0
    assert session.gate.interval == 0.0
    with pytest.raises(ValueError):
        session.interval = -0.5
    await session.run("forward 1")


def test_default_session_builds_its_own_context():
    session = ExecutionSession(WordInterpreter())
    assert session.ctx.turtle.position == (0.0, 0.0)
    assert session.state.status is SessionStatus.IDLE
    assert session.renderer.view is session.ctx.debug_view
