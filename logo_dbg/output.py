"""Output helpers for logo-dbg."""

from __future__ import annotations

import json
import sys
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.styles import Style
from tabulate import tabulate

from logodbg.gate import StepEvent
from logodbg.trace import DebugView
from logodbg.turtle import TurtleState

STYLE = Style.from_dict(
    {
        "input": "#888888",
        "output": "",
        "error": "ansired bold",
        "trace": "#5f87af",
        "list": "",
        "active": "reverse bold",
    }
)


def _json_dump(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, sort_keys=True)


class ConsoleOutput:
    """Text-output sink: ``print(category, text)`` plus trace rendering."""

    def __init__(self, *, json_output: bool = False, color: Optional[bool] = None) -> None:
        self.json_output = json_output
        self.color = sys.stdout.isatty() if color is None else color

    def __call__(self, category: str, text: str) -> None:
        if self.json_output:
            print(_json_dump({"category": category, "text": text}))
        elif self.color:
            print_formatted_text(FormattedText([(f"class:{category}", text)]), style=STYLE)
        else:
            prefix = "error: " if category == "error" else ""
            print(f"{prefix}{text}")

    def trace(self, view: DebugView, event: Optional[StepEvent] = None) -> None:
        """Print the debug view with the active node highlighted."""
        seq = event.seq if event is not None else None
        if self.json_output:
            payload: Dict[str, Any] = {"category": "trace", "text": view.to_text(mark_active=True)}
            if seq is not None:
                payload["seq"] = seq
            print(_json_dump(payload))
            return
        label = f"#{seq} " if seq is not None else ""
        if self.color:
            fragments = [("class:trace", label)] + view.to_fragments()
            print_formatted_text(FormattedText(fragments), style=STYLE)
        else:
            print(f"{label}{view.to_text(mark_active=True)}")


def render_table(rows: Iterable[Sequence[Any]], headers: Sequence[str]) -> str:
    return tabulate(list(rows), headers=list(headers), tablefmt="github")


def render_turtle_table(turtle: TurtleState) -> str:
    rows = [
        ("x", f"{turtle.x:g}"),
        ("y", f"{turtle.y:g}"),
        ("heading", f"{turtle.heading:g}"),
        ("pen", "down" if turtle.pen_down else "up"),
        ("color", turtle.pen_color),
        ("segments", len(turtle.segments)),
    ]
    return render_table(rows, headers=["field", "value"])


__all__ = ["ConsoleOutput", "STYLE", "render_table", "render_turtle_table"]
