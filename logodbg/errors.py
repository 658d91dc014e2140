"""Exception types raised by the stepped execution bridge."""

from __future__ import annotations

from typing import Any


class BridgeError(RuntimeError):
    """Base class for bridge failures."""


class SessionBusyError(BridgeError):
    """Raised when a run is started while another one is still active."""


class StepPendingError(BridgeError):
    """Raised when a call boundary arrives while a step is still pending."""


class InterpreterError(BridgeError):
    """Raised when the interpreted program fails."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"{type(cause).__name__}: {cause}")
        self.cause = cause


class CancellationError(BridgeError):
    """Raised when the host cancels a run; carries the caller's reason."""

    def __init__(self, reason: Any = "stopped") -> None:
        super().__init__(str(reason))
        self.reason = reason


class ValidationError(TypeError):
    """Raised by command handlers for malformed arguments."""


def find_cancellation(exc: BaseException) -> CancellationError | None:
    """Return the CancellationError in *exc*'s cause/context chain, if any."""
    seen = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, CancellationError):
            return current
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return None


__all__ = [
    "BridgeError",
    "SessionBusyError",
    "StepPendingError",
    "InterpreterError",
    "CancellationError",
    "ValidationError",
    "find_cancellation",
]
