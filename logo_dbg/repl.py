"""Interactive REPL for logo-dbg."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import FileHistory, History, InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from logodbg.session import ExecutionSession

from .host import run_program
from .output import render_table, render_turtle_table

LOGGER = logging.getLogger("logo_dbg.repl")

META_PREFIX = ":"


@dataclass
class MetaCommand:
    name: str
    description: str
    run: Callable[[List[str]], Optional[bool]]
    usage: str = ""


class LogoREPL:
    """prompt_toolkit loop: lines are programs, ``:``-lines are host commands."""

    def __init__(
        self,
        session: ExecutionSession,
        *,
        history_path: Optional[Path] = None,
        runner: Callable[[ExecutionSession, str], Awaitable[int]] = run_program,
    ) -> None:
        self.session = session
        self.history_path = history_path
        self.runner = runner
        self.last_status = 0
        self.meta: Dict[str, MetaCommand] = {}
        for command in (
            MetaCommand("help", "Show host and turtle commands", self._help),
            MetaCommand("turtle", "Show the turtle state", self._turtle),
            MetaCommand("trace", "Toggle the trace view", self._trace, usage="on|off"),
            MetaCommand("interval", "Set the pacing interval", self._interval, usage="SECONDS"),
            MetaCommand("quit", "Leave the REPL", self._quit),
        ):
            self.meta[command.name] = command

    async def run(self) -> int:
        prompt = PromptSession(
            "? ",
            history=self._history(),
            completer=WordCompleter(self._completions(), sentence=True),
        )
        buffer: List[str] = []
        while True:
            try:
                with patch_stdout():
                    line = await prompt.prompt_async()
            except (EOFError, KeyboardInterrupt):
                print()
                return 0
            if self._handle_multiline(buffer, line):
                continue
            payload = "\n".join(buffer) if buffer else line
            buffer.clear()
            if not await self.dispatch(payload):
                return 0

    async def dispatch(self, line: str) -> bool:
        """Handle one complete entry; returns False when the REPL should stop."""
        stripped = line.strip()
        if not stripped:
            return True
        if stripped.startswith(META_PREFIX):
            return self._dispatch_meta(stripped[len(META_PREFIX):])
        self.last_status = await self.runner(self.session, stripped)
        return True

    def _dispatch_meta(self, text: str) -> bool:
        tokens = text.split()
        if not tokens:
            self.session.ctx.print("error", f"Missing command after {META_PREFIX}")
            return True
        name, *args = tokens
        command = self.meta.get(name)
        if command is None:
            self.session.ctx.print("error", f"Unknown command: {META_PREFIX}{name}")
            return True
        try:
            return command.run(args) is not False
        except ValueError as exc:
            usage = f"{META_PREFIX}{command.name} {command.usage}".strip()
            self.session.ctx.print("error", f"{exc} (usage: {usage})")
            return True

    def _handle_multiline(self, buffer: List[str], line: str) -> bool:
        stripped = line.rstrip()
        if stripped.endswith("\\"):
            buffer.append(stripped[:-1])
            return True
        if buffer:
            buffer.append(stripped)
        return False

    def _history(self) -> History:
        if self.history_path is None:
            return InMemoryHistory()
        path = Path(self.history_path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        return FileHistory(str(path))

    def _completions(self) -> List[str]:
        words = [f"{META_PREFIX}{name}" for name in self.meta]
        return words + self.session.commands.names()

    # ------------------------------------------------------------------
    # Meta commands
    # ------------------------------------------------------------------

    def _help(self, args: List[str]) -> None:
        host_rows = [(f"{META_PREFIX}{c.name} {c.usage}".strip(), c.description) for c in self.meta.values()]
        turtle_rows = [
            (", ".join((c.name, *c.aliases)), c.description) for c in self.session.commands.list_commands()
        ]
        print(render_table(host_rows, headers=["host command", "description"]))
        print()
        print(render_table(turtle_rows, headers=["turtle command", "description"]))

    def _turtle(self, args: List[str]) -> None:
        print(render_turtle_table(self.session.ctx.turtle))

    def _trace(self, args: List[str]) -> None:
        if len(args) != 1 or args[0] not in {"on", "off"}:
            raise ValueError("expected on or off")
        self.session.config.trace = args[0] == "on"
        if not self.session.config.trace:
            self.session.ctx.debug_view.clear()
        print(f"trace {args[0]}")

    def _interval(self, args: List[str]) -> None:
        if len(args) != 1:
            raise ValueError("expected one value")
        self.session.interval = float(args[0])
        print(f"pacing interval {self.session.interval:g}s")

    def _quit(self, args: List[str]) -> bool:
        return False


__all__ = ["LogoREPL", "MetaCommand"]
