"""Provide exceptions used by tmuxlib.

tmuxlib.exc
~~~~~~~~~~~

Every failure tmuxlib can report maps to one :class:`~tmuxlib.constants.FailureKind`.
Query operations raise these exceptions; mutation operations return a
:class:`~tmuxlib.common.CommandResult` carrying the same classification, which
can be turned into one of these exceptions with
:meth:`~tmuxlib.common.CommandResult.raise_for_failure`.
"""

from __future__ import annotations

import typing as t

from tmuxlib.constants import FailureKind

if t.TYPE_CHECKING:
    from collections.abc import Sequence


class TmuxLibException(Exception):
    """Base exception for all tmuxlib errors."""

    kind: FailureKind | None = None


class CommandFailure(TmuxLibException):
    """A tmux invocation failed. Carries the command line and raw stderr."""

    def __init__(
        self,
        message: str,
        *,
        argv: Sequence[str] | None = None,
        stderr: Sequence[str] | None = None,
    ) -> None:
        self.argv: list[str] = list(argv) if argv is not None else []
        self.stderr: list[str] = list(stderr) if stderr is not None else []
        if self.argv:
            message = f"{message} (command: {' '.join(self.argv)})"
        super().__init__(message)


class LaunchFailure(CommandFailure):
    """Raised when the tmux binary cannot be found or executed."""

    kind = FailureKind.LaunchFailure


class ToolError(CommandFailure):
    """Raised when tmux ran and reported an error."""

    kind = FailureKind.ToolError


class TargetNotFound(CommandFailure):
    """Raised when a referenced session, window or pane does not exist."""

    kind = FailureKind.TargetNotFound


class OptionError(ToolError):
    """Root error for any error involving invalid, ambiguous or bad options."""


class UnknownOption(OptionError):
    """Option unknown to tmux show-option(s)."""


class InvalidOption(OptionError):
    """Option invalid to tmux."""


class AmbiguousOption(OptionError):
    """Option that could potentially match more than one."""


class MalformedRecord(TmuxLibException):
    """Raised when tmux output does not match the expected field layout.

    Usually a sign the installed tmux formats a variable differently than
    tmuxlib expects.
    """

    kind = FailureKind.MalformedRecord

    def __init__(
        self,
        line_index: int,
        line: str,
        reason: str,
        *args: object,
    ) -> None:
        self.line_index = line_index
        self.line = line
        self.reason = reason
        super().__init__(f"Malformed record at line {line_index}: {reason} ({line!r})")


class InvalidParameter(TmuxLibException, ValueError):
    """Raised when a caller-supplied value fails validation before invoking tmux."""

    kind = FailureKind.InvalidParameter


class BadSessionName(InvalidParameter):
    """Disallowed session name for tmux (empty, contains periods or colons)."""

    def __init__(
        self,
        reason: str,
        session_name: str | None = None,
        *args: object,
    ) -> None:
        msg = f"Bad session name: {reason}"
        if session_name is not None:
            msg += f" (session name: {session_name!r})"
        super().__init__(msg)


class TmuxConfigError(TmuxLibException):
    """Raised when the tmux server configuration lacks a required option."""


class VersionTooLow(TmuxLibException):
    """Raised if tmux below the minimum version to use tmuxlib."""


class WaitTimeout(TmuxLibException):
    """Function timed out without meeting condition."""


FAILURE_EXCEPTIONS: dict[FailureKind, type[TmuxLibException]] = {
    FailureKind.LaunchFailure: LaunchFailure,
    FailureKind.ToolError: ToolError,
    FailureKind.TargetNotFound: TargetNotFound,
    FailureKind.MalformedRecord: MalformedRecord,
    FailureKind.InvalidParameter: InvalidParameter,
}
