"""
Pytest fixtures for the stepped execution bridge.
"""

import pytest

from logodbg.context import BufferedOutput, HostContext
from logodbg.session import ExecutionSession, SessionConfig

from tests.stubs import WordInterpreter


@pytest.fixture
def output():
    return BufferedOutput()


@pytest.fixture
def ctx(output):
    return HostContext(output=output)


@pytest.fixture
def interpreter():
    return WordInterpreter()


@pytest.fixture
def session(interpreter, ctx):
    return ExecutionSession(interpreter, ctx, config=SessionConfig(pacing_interval=0.01))
