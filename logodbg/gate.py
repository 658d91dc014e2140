"""Step gate: paces every interpreter call and carries the cancellation hook.

Each call boundary produces one ``PendingStep``.  The timer and the
cancellation hook are installed synchronously inside ``StepGate.step`` so a
``cancel`` issued at any point after that call returns is guaranteed to see the
step.  Whichever of elapse, cancel or task cancellation settles the step first
also retracts it from the gate.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence

from .errors import CancellationError, StepPendingError
from .trace import TraceRenderer


logger = logging.getLogger(__name__)

DEFAULT_PACING_INTERVAL = 0.1


@dataclass
class StepEvent:
    seq: int
    name: str
    args: Sequence[Any]
    node: Any = field(default=None, repr=False)
    ts: float = field(default_factory=time.time)


StepListener = Callable[[StepEvent], None]


class PendingStep:
    """Awaitable handle for one paced call boundary."""

    def __init__(self, gate: "StepGate", seq: int, future: asyncio.Future) -> None:
        self.gate = gate
        self.seq = seq
        self._future = future
        self._handle: Optional[asyncio.TimerHandle] = None

    def __await__(self):
        return self._future.__await__()

    def done(self) -> bool:
        return self._future.done()

    def cancel(self, reason: Any = "stopped") -> bool:
        """Reject the step with ``CancellationError(reason)`` if still waiting."""
        if self._future.done():
            return False
        self.gate._retract(self)
        self._future.set_exception(CancellationError(reason))
        logger.debug("step %d canceled: %s", self.seq, reason)
        return True

    def _elapse(self) -> None:
        if self._future.done():
            return
        self.gate._retract(self)
        self._future.set_result(None)


class StepGate:
    """Cooperative pacing plus a single cancellation hook."""

    def __init__(self, renderer: Optional[TraceRenderer] = None, *, interval: float = DEFAULT_PACING_INTERVAL) -> None:
        if interval < 0:
            raise ValueError("pacing interval must not be negative")
        self.renderer = renderer if renderer is not None else TraceRenderer()
        self.interval = interval
        self._pending: Optional[PendingStep] = None
        self._seq = 0
        self._listeners: List[StepListener] = []

    @property
    def pending(self) -> Optional[PendingStep]:
        return self._pending

    @property
    def steps(self) -> int:
        return self._seq

    def add_listener(self, listener: StepListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StepListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def step(self, func: Any, args: Sequence[Any] = (), body: Any = None, node: Any = None) -> PendingStep:
        """Update the trace view, then start the paced wait for this call."""
        if self._pending is not None:
            raise StepPendingError(f"step {self._pending.seq} is still pending")
        loop = asyncio.get_running_loop()
        self._seq += 1
        if body is not None and node is not None:
            self.renderer.update_body(body, node)
        self._notify(StepEvent(self._seq, _callable_name(func), tuple(args), node))

        future = loop.create_future()
        pending = PendingStep(self, self._seq, future)
        pending._handle = loop.call_later(self.interval, pending._elapse)
        future.add_done_callback(lambda _fut: self._retract(pending))
        self._pending = pending
        logger.debug("step %d waiting %.3fs", pending.seq, self.interval)
        return pending

    def cancel(self, reason: Any = "stopped") -> bool:
        """Cancel the pending step, if any.  Returns True when one was canceled."""
        pending = self._pending
        if pending is None:
            return False
        return pending.cancel(reason)

    def reset(self) -> None:
        self._seq = 0

    def _retract(self, pending: PendingStep) -> None:
        if pending._handle is not None:
            pending._handle.cancel()
            pending._handle = None
        if self._pending is pending:
            self._pending = None

    def _notify(self, event: StepEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("step listener failed")


def _callable_name(func: Any) -> str:
    if func is None:
        return ""
    if isinstance(func, str):
        return func
    return getattr(func, "__name__", None) or repr(func)


__all__ = ["StepGate", "PendingStep", "StepEvent", "StepListener", "DEFAULT_PACING_INTERVAL"]
