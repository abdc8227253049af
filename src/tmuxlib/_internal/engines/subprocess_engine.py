"""Subprocess engine for tmuxlib."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import typing as t

from tmuxlib import exc
from tmuxlib.common import CommandResult
from tmuxlib.constants import FailureKind

if t.TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

#: Environment variable overriding the tmux binary looked up on ``PATH``
TMUX_BIN_ENV = "TMUXLIB_TMUX_BIN"


class SubprocessCommandRunner:
    """Run tmux commands through :class:`subprocess.Popen`.

    One process per call; the call blocks until tmux exits. There is no
    timeout and no retry.

    Parameters
    ----------
    tmux_bin : str, optional
        Path to the tmux binary. Defaults to ``$TMUXLIB_TMUX_BIN``, then to
        ``tmux`` on ``PATH``.
    """

    def __init__(self, tmux_bin: str | None = None) -> None:
        self.tmux_bin = tmux_bin

    def resolve_bin(self) -> str | None:
        """Return the tmux binary to execute, or None if none can be found."""
        if self.tmux_bin:
            return self.tmux_bin
        return os.getenv(TMUX_BIN_ENV) or shutil.which("tmux")

    def run(
        self,
        args: Sequence[str | int],
        format: str | None = None,
    ) -> CommandResult:
        """Run a tmux command using ``subprocess.Popen``."""
        if not args:
            msg = "tmux invocation requires at least one argument"
            raise exc.InvalidParameter(msg)

        tmux_bin = self.resolve_bin()

        cmd = [str(c) for c in args]
        if format is not None:
            cmd.append(f"-F{format}")

        if not tmux_bin:
            argv = ["tmux", *cmd]
            logger.warning("tmux not found on PATH for %s", subprocess.list2cmdline(argv))
            return CommandResult(
                argv=argv,
                returncode=None,
                failure=FailureKind.LaunchFailure,
                diagnostic="tmux binary not found",
            )

        argv = [tmux_bin, *cmd]

        try:
            process = subprocess.Popen(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                stdin=subprocess.DEVNULL,
                text=True,
                errors="backslashreplace",
            )
            stdout, stderr = process.communicate()
        except OSError as e:
            logger.warning("Could not launch %s: %s", subprocess.list2cmdline(argv), e)
            return CommandResult(
                argv=argv,
                returncode=None,
                failure=FailureKind.LaunchFailure,
                diagnostic=str(e),
            )

        stdout_split = stdout.split("\n")
        # remove trailing newlines from stdout
        while stdout_split and stdout_split[-1] == "":
            stdout_split.pop()

        stderr_split = list(filter(None, stderr.split("\n")))

        logger.debug(
            "stdout for %s: %s",
            subprocess.list2cmdline(argv),
            stdout_split,
        )

        result = CommandResult.from_process(
            argv=argv,
            stdout=stdout_split,
            stderr=stderr_split,
            returncode=process.returncode,
        )
        if not result.ok:
            logger.debug(
                "%s failed (%s): %s",
                subprocess.list2cmdline(argv),
                result.failure,
                result.diagnostic,
            )
        return result
