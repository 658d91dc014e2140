"""Run one program through the session the way the console host presents it."""

from __future__ import annotations

import asyncio
import logging
import signal

from logodbg.errors import CancellationError, InterpreterError, SessionBusyError
from logodbg.session import ExecutionSession

LOGGER = logging.getLogger("logo_dbg.host")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELED = 130

STOP_REASON = "stopped by user"


async def run_program(session: ExecutionSession, source: str) -> int:
    """Echo, run and report *source*; Ctrl-C cancels the run instead of the host."""

    ctx = session.ctx
    ctx.print("input", source)
    try:
        task = session.start(source)
    except SessionBusyError as exc:
        ctx.print("error", str(exc))
        return EXIT_ERROR
    loop = asyncio.get_running_loop()
    sigint_hooked = _hook_sigint(loop, session)
    try:
        await task
    except CancellationError as exc:
        ctx.print("error", f"canceled: {exc.reason}")
        return EXIT_CANCELED
    except InterpreterError as exc:
        LOGGER.debug("program failed", exc_info=exc.cause)
        ctx.print("error", str(exc.cause))
        return EXIT_ERROR
    finally:
        if sigint_hooked:
            loop.remove_signal_handler(signal.SIGINT)
    return EXIT_OK


def _hook_sigint(loop: asyncio.AbstractEventLoop, session: ExecutionSession) -> bool:
    try:
        loop.add_signal_handler(signal.SIGINT, session.cancel, STOP_REASON)
    except (NotImplementedError, RuntimeError, ValueError) as exc:
        LOGGER.debug("SIGINT handler unavailable: %s", exc)
        return False
    return True


__all__ = ["run_program", "EXIT_OK", "EXIT_ERROR", "EXIT_CANCELED", "STOP_REASON"]
