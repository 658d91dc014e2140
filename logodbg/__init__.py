"""
logodbg - stepped execution bridge for Logo interpreters.

Turns a free-running interpreter into a single-steppable, cancelable and
traceable process for an interactive host.  Each module keeps one
responsibility:

    values.py      → immutable cons-style List values
    turtle.py      → headless turtle graphics state
    context.py     → per-host turtle, output sink and debug view
    commands.py    → turtle command table bound into the interpreter
    trace.py       → view tree of the executing body, active-node marker
    gate.py        → paced, cancelable call boundaries
    session.py     → run lifecycle (start, cancel, outcome)
    interpreter.py → interpreter contract and loader
"""

from .values import EMPTY, Cons, Empty, List  # noqa: F401
from .errors import (  # noqa: F401
    BridgeError,
    CancellationError,
    InterpreterError,
    SessionBusyError,
    StepPendingError,
    ValidationError,
)
from .turtle import Segment, TurtleState  # noqa: F401
from .context import BufferedOutput, HostContext  # noqa: F401
from .commands import Command, CommandRegistry, build_command_table  # noqa: F401
from .trace import DebugView, TraceRenderer, ViewNode  # noqa: F401
from .gate import DEFAULT_PACING_INTERVAL, PendingStep, StepEvent, StepGate  # noqa: F401
from .session import ExecutionSession, SessionConfig, SessionState, SessionStatus  # noqa: F401
from .interpreter import Interpreter, load_interpreter  # noqa: F401

__all__ = [
    "List",
    "Empty",
    "Cons",
    "EMPTY",
    "BridgeError",
    "CancellationError",
    "InterpreterError",
    "SessionBusyError",
    "StepPendingError",
    "ValidationError",
    "TurtleState",
    "Segment",
    "HostContext",
    "BufferedOutput",
    "Command",
    "CommandRegistry",
    "build_command_table",
    "DebugView",
    "TraceRenderer",
    "ViewNode",
    "StepGate",
    "PendingStep",
    "StepEvent",
    "DEFAULT_PACING_INTERVAL",
    "ExecutionSession",
    "SessionConfig",
    "SessionState",
    "SessionStatus",
    "Interpreter",
    "load_interpreter",
]

__version__ = "0.1.0"
