"""Per-host state shared by the session and the command handlers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Tuple

from .trace import DebugView
from .turtle import TurtleState

LOGGER = logging.getLogger(__name__)

OutputSink = Callable[[str, str], None]


class BufferedOutput:
    """Output sink that keeps ``(category, text)`` pairs in memory."""

    def __init__(self) -> None:
        self.lines: List[Tuple[str, str]] = []

    def __call__(self, category: str, text: str) -> None:
        self.lines.append((category, text))

    def texts(self, category: str) -> List[str]:
        return [text for cat, text in self.lines if cat == category]


@dataclass
class HostContext:
    """Holds the turtle, output sink and debug view for one host instance."""

    turtle: TurtleState = field(default_factory=TurtleState)
    output: OutputSink = field(default_factory=BufferedOutput)
    debug_view: DebugView = field(default_factory=DebugView)

    def print(self, category: str, text: str) -> None:
        try:
            self.output(category, text)
        except Exception:
            LOGGER.exception("output sink failed for %s line", category)


__all__ = ["HostContext", "BufferedOutput", "OutputSink"]
