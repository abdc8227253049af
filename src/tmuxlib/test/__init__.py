"""Helpers for testing code built on tmuxlib against a live tmux server."""

from __future__ import annotations

from tmuxlib.test.constants import (
    RETRY_INTERVAL_SECONDS,
    RETRY_TIMEOUT_SECONDS,
    TEST_SESSION_PREFIX,
)
from tmuxlib.test.random import get_test_session_name, namer
from tmuxlib.test.retry import retry_until

__all__ = (
    "RETRY_INTERVAL_SECONDS",
    "RETRY_TIMEOUT_SECONDS",
    "TEST_SESSION_PREFIX",
    "get_test_session_name",
    "namer",
    "retry_until",
)
