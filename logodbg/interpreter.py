"""Contract expected from the Logo interpreter collaborator."""

from __future__ import annotations

import importlib
from typing import Any, Awaitable, Callable, Mapping, Optional, Protocol, Sequence, runtime_checkable

CallHook = Callable[[Any, Sequence[Any], Any, Any], Awaitable[None]]
BreakHook = Callable[[Any], None]


@runtime_checkable
class Interpreter(Protocol):
    """What the bridge needs from an interpreter.

    ``execute`` evaluates a program.  Before every call the interpreter awaits
    ``oncall(func, args, body, node)``; ``body``/``node`` may be ``None`` for
    calls without a source position.  ``request_break(reason)`` is the
    language-level break request and must invoke ``onbreak(reason)``.
    """

    oncall: Optional[CallHook]
    onbreak: Optional[BreakHook]

    async def execute(self, source: str) -> Any:
        ...

    def bind_values(self, values: Mapping[str, Any]) -> None:
        ...

    def request_break(self, reason: Any = ...) -> None:
        ...


def load_interpreter(target: str, *args: Any, **kwargs: Any) -> Interpreter:
    """Instantiate an interpreter from a ``"package.module:factory"`` string."""

    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"interpreter must look like 'module:factory', got {target!r}")
    module = importlib.import_module(module_name)
    factory = module
    for part in attr.split("."):
        factory = getattr(factory, part)
    interpreter = factory(*args, **kwargs)
    if not isinstance(interpreter, Interpreter):
        raise TypeError(f"{target} did not produce an interpreter (got {type(interpreter).__name__})")
    return interpreter


__all__ = ["Interpreter", "CallHook", "BreakHook", "load_interpreter"]
