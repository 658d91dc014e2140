"""Execution session: one interpreter run from start to a terminal outcome."""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from .commands import CommandRegistry, build_command_table
from .context import HostContext
from .errors import CancellationError, InterpreterError, SessionBusyError, find_cancellation
from .gate import DEFAULT_PACING_INTERVAL, PendingStep, StepGate, StepListener
from .interpreter import Interpreter
from .trace import TraceRenderer


logger = logging.getLogger(__name__)


class SessionStatus(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    CANCELING = "canceling"
    COMPLETED = "completed"
    FAILED = "failed"


_ACTIVE = {SessionStatus.RUNNING, SessionStatus.CANCELING}


@dataclass
class SessionConfig:
    pacing_interval: float = DEFAULT_PACING_INTERVAL
    trace: bool = True


@dataclass
class SessionState:
    status: SessionStatus = SessionStatus.IDLE
    run_id: int = 0
    source: str = ""
    steps: int = 0
    cancel_reason: Any = None
    error: Optional[BaseException] = None

    @property
    def active(self) -> bool:
        return self.status in _ACTIVE


class ExecutionSession:
    """Owns the interpreter for one host and runs programs through the step gate."""

    def __init__(
        self,
        interpreter: Interpreter,
        ctx: Optional[HostContext] = None,
        *,
        config: Optional[SessionConfig] = None,
        gate: Optional[StepGate] = None,
    ) -> None:
        self.interpreter = interpreter
        self.ctx = ctx or HostContext()
        self.config = config or SessionConfig()
        self.gate = gate or StepGate(TraceRenderer(self.ctx.debug_view), interval=self.config.pacing_interval)
        self.renderer = self.gate.renderer
        self.commands: CommandRegistry = build_command_table(self.ctx)
        self.state = SessionState()
        self._next_run_id = 1

        interpreter.bind_values(self.commands.bindings())
        interpreter.oncall = self._on_call
        interpreter.onbreak = self.cancel

    @property
    def active(self) -> bool:
        return self.state.active

    @property
    def interval(self) -> float:
        return self.gate.interval

    @interval.setter
    def interval(self, value: float) -> None:
        if value < 0:
            raise ValueError("pacing interval must not be negative")
        self.gate.interval = value

    def add_step_listener(self, listener: StepListener) -> None:
        self.gate.add_listener(listener)

    def remove_step_listener(self, listener: StepListener) -> None:
        self.gate.remove_listener(listener)

    def start(self, source: str) -> "asyncio.Task[None]":
        """Begin running *source*; the returned task settles with the outcome."""
        if self.state.active:
            raise SessionBusyError(f"run {self.state.run_id} is still {self.state.status.value}")
        loop = asyncio.get_running_loop()
        run_id = self._next_run_id
        self._next_run_id += 1
        self.state = SessionState(status=SessionStatus.RUNNING, run_id=run_id, source=source)
        self.gate.reset()
        logger.info("run %d started (%d chars)", run_id, len(source))
        return loop.create_task(self._run(self.state))

    async def run(self, source: str) -> None:
        await self.start(source)

    def cancel(self, reason: Any = "stopped") -> None:
        """Request the active run to stop at the next opportunity."""
        state = self.state
        if state.status is not SessionStatus.RUNNING:
            return
        state.status = SessionStatus.CANCELING
        state.cancel_reason = reason
        if self.gate.cancel(reason):
            logger.info("run %d canceled during step: %s", state.run_id, reason)
        else:
            logger.info("run %d cancel deferred to next step: %s", state.run_id, reason)

    def _on_call(self, func: Any, args: Sequence[Any] = (), body: Any = None, node: Any = None) -> PendingStep:
        state = self.state
        pending = self.gate.step(func, args, body if self.config.trace else None, node)
        state.steps = pending.seq
        if state.status is SessionStatus.CANCELING:
            pending.cancel(state.cancel_reason)
        return pending

    async def _run(self, state: SessionState) -> None:
        try:
            await self.interpreter.execute(state.source)
        except asyncio.CancelledError as exc:
            self._finish(state, SessionStatus.FAILED, exc)
            raise
        except Exception as exc:
            cancellation = find_cancellation(exc)
            if cancellation is not None:
                self._finish(state, SessionStatus.FAILED, cancellation)
                if cancellation is exc:
                    raise
                raise cancellation from exc
            self._finish(state, SessionStatus.FAILED, exc)
            raise InterpreterError(exc) from exc
        else:
            if state.status is SessionStatus.CANCELING:
                logger.info("run %d finished before its cancellation took effect", state.run_id)
            self._finish(state, SessionStatus.COMPLETED, None)

    def _finish(self, state: SessionState, status: SessionStatus, error: Optional[BaseException]) -> None:
        self.gate.cancel(state.cancel_reason or "session finished")
        self.renderer.release()
        state.status = status
        state.error = error
        if error is None:
            logger.info("run %d completed after %d steps", state.run_id, state.steps)
        elif isinstance(error, CancellationError):
            logger.info("run %d canceled after %d steps: %s", state.run_id, state.steps, error.reason)
        else:
            logger.info("run %d failed after %d steps: %s", state.run_id, state.steps, error)


__all__ = ["ExecutionSession", "SessionConfig", "SessionState", "SessionStatus"]
