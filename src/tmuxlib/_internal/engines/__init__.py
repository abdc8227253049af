"""Command execution engines for tmuxlib."""

from __future__ import annotations

__all__ = ("SubprocessCommandRunner",)

from tmuxlib._internal.engines.subprocess_engine import SubprocessCommandRunner
