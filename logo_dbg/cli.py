"""logo-dbg CLI entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from logodbg.context import HostContext
from logodbg.gate import DEFAULT_PACING_INTERVAL, StepEvent
from logodbg.interpreter import load_interpreter
from logodbg.session import ExecutionSession, SessionConfig

from .host import run_program
from .output import ConsoleOutput
from .repl import LogoREPL

LOG = logging.getLogger("logo_dbg.cli")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _default_interval() -> float:
    raw = os.environ.get("LOGO_DBG_INTERVAL")
    if not raw:
        return DEFAULT_PACING_INTERVAL
    try:
        return float(raw)
    except ValueError:
        LOG.warning("ignoring invalid LOGO_DBG_INTERVAL=%r", raw)
        return DEFAULT_PACING_INTERVAL


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Step through Logo programs with a paced, cancelable trace")
    parser.add_argument(
        "--interpreter",
        default=os.environ.get("LOGO_DBG_INTERPRETER"),
        help="Interpreter factory as module:attr (default $LOGO_DBG_INTERPRETER)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=_default_interval(),
        help=f"Pacing interval per call in seconds (default {DEFAULT_PACING_INTERVAL})",
    )
    parser.add_argument("--no-trace", action="store_true", help="Do not render the executing body")
    parser.add_argument("--json", action="store_true", help="Emit JSON lines instead of styled text")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOGO_DBG_LOG", "WARNING"),
        help="Logging level (default WARNING)",
    )
    parser.add_argument(
        "-c",
        "--command",
        help="Run a single program non-interactively (quote the program text)",
    )
    parser.add_argument(
        "--history",
        type=Path,
        default=Path.home() / ".logo-dbg-history",
        help="Path to the prompt history file",
    )
    return parser


def build_session(args: argparse.Namespace, output: Optional[ConsoleOutput] = None) -> ExecutionSession:
    interpreter = load_interpreter(args.interpreter)
    output = output or ConsoleOutput(json_output=args.json)
    ctx = HostContext(output=output)
    config = SessionConfig(pacing_interval=args.interval, trace=not args.no_trace)
    session = ExecutionSession(interpreter, ctx, config=config)

    def _show_trace(event: StepEvent) -> None:
        if session.config.trace and ctx.debug_view.root is not None:
            output.trace(ctx.debug_view, event)

    session.add_step_listener(_show_trace)
    return session


def main(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    if not args.interpreter:
        parser.error("an interpreter is required (--interpreter or LOGO_DBG_INTERPRETER)")
    if args.interval < 0:
        parser.error("--interval must not be negative")
    try:
        session = build_session(args)
    except (ImportError, AttributeError, TypeError, ValueError) as exc:
        LOG.debug("interpreter setup failed", exc_info=True)
        print(f"error: cannot load interpreter {args.interpreter!r}: {exc}", file=sys.stderr)
        return 2
    if args.command:
        return asyncio.run(run_program(session, args.command))
    repl = LogoREPL(session, history_path=args.history)
    try:
        return asyncio.run(repl.run())
    except KeyboardInterrupt:
        print()
        return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
