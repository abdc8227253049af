"""Fake command runner for driving :class:`~tmuxlib.server.Server` without tmux."""

from __future__ import annotations

import typing as t

from tmuxlib.common import CommandResult
from tmuxlib.constants import FailureKind

if t.TYPE_CHECKING:
    from collections.abc import Sequence


class Reply(t.NamedTuple):
    """Scripted outcome of one fake tmux invocation."""

    stdout: list[str] = []
    stderr: list[str] = []
    returncode: int = 0
    launch_failure: bool = False


class Call(t.NamedTuple):
    """One recorded invocation."""

    args: list[str]
    format: str | None


class FakeCommandRunner:
    """Record every invocation and answer from a script of :class:`Reply`.

    Once the script runs out, invocations succeed with no output.
    """

    def __init__(self, *replies: Reply) -> None:
        self.replies = list(replies)
        self.calls: list[Call] = []

    def run(
        self,
        args: Sequence[str | int],
        format: str | None = None,
    ) -> CommandResult:
        cmd = [str(a) for a in args]
        self.calls.append(Call(args=list(cmd), format=format))
        if format is not None:
            cmd.append(f"-F{format}")
        argv = ["tmux", *cmd]

        reply = self.replies.pop(0) if self.replies else Reply()
        if reply.launch_failure:
            return CommandResult(
                argv=argv,
                returncode=None,
                failure=FailureKind.LaunchFailure,
                diagnostic="tmux binary not found",
            )
        return CommandResult.from_process(
            argv=argv,
            stdout=reply.stdout,
            stderr=reply.stderr,
            returncode=reply.returncode,
        )

    @property
    def last_args(self) -> list[str]:
        assert self.calls, "no tmux invocation recorded"
        return self.calls[-1].args


#: tmux's reply when nothing listens on the socket
NO_SERVER = Reply(
    stderr=["no server running on /tmp/tmux-1000/default"],
    returncode=1,
)


def line(*values: object, separator: str = "␞") -> str:
    """Join raw values the way tmux prints a ``-F`` line."""
    return separator.join(str(v) for v in values)
