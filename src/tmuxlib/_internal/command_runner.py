"""Command runner protocol for tmux execution engines."""

from __future__ import annotations

import typing as t
from typing import Protocol

if t.TYPE_CHECKING:
    from collections.abc import Sequence

    from tmuxlib.common import CommandResult


class CommandRunner(Protocol):
    """Protocol for tmux command execution engines.

    Implementations execute one tmux process per :meth:`run` call and report
    every outcome, including a tmux binary that cannot be started, as a
    :class:`~tmuxlib.common.CommandResult` rather than raising.

    Examples
    --------
    >>> from tmuxlib._internal.engines import SubprocessCommandRunner
    >>> runner = SubprocessCommandRunner()
    >>> result = runner.run(["-V"])
    >>> assert hasattr(result, 'stdout')
    >>> assert hasattr(result, 'failure')
    """

    def run(
        self,
        args: Sequence[str | int],
        format: str | None = None,
    ) -> CommandResult:
        """Execute a tmux command.

        Parameters
        ----------
        args : sequence of str
            Arguments passed to the tmux binary. Must not be empty.
        format : str, optional
            Appended as ``-F<format>`` to control the output layout.

        Returns
        -------
        :class:`~tmuxlib.common.CommandResult`
        """
        ...
