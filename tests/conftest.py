"""Fixtures for tmuxlib's own tests."""

from __future__ import annotations

import pytest

from tests.helpers import FakeCommandRunner
from tmuxlib.server import Server


@pytest.fixture
def fake_runner() -> FakeCommandRunner:
    """Return a runner answering every invocation with empty success."""
    return FakeCommandRunner()


@pytest.fixture
def fake_server(fake_runner: FakeCommandRunner) -> Server:
    """Return a :class:`Server` on socket ``fake`` backed by :func:`fake_runner`."""
    return Server(socket_name="fake", command_runner=fake_runner)
