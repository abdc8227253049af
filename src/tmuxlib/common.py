"""Helper methods and mixins for tmuxlib.

tmuxlib.common
~~~~~~~~~~~~~~

"""

from __future__ import annotations

import dataclasses
import logging
import re
import sys
import typing as t

from . import exc
from .constants import TARGET_NOT_FOUND_MESSAGES, FailureKind
from .formats import FORMAT_SEPARATOR

if t.TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


#: Minimum version of tmux required to run tmuxlib
TMUX_MIN_VERSION = "3.2a"

#: Most recent version of tmux supported
TMUX_MAX_VERSION = "3.6"

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")


@dataclasses.dataclass(frozen=True)
class CommandResult:
    """Outcome of exactly one tmux invocation.

    A result is either a success (``failure is None``), optionally carrying the
    captured output, or a failure classified by :class:`FailureKind` together
    with the raw diagnostic text.

    Examples
    --------
    >>> ok = CommandResult(argv=["tmux", "-V"], stdout=["tmux 3.4"])
    >>> ok.ok
    True
    >>> ok.raise_for_failure()

    >>> failed = CommandResult(
    ...     argv=["tmux", "kill-session", "-t", "=nope"],
    ...     stderr=["can't find session: nope"],
    ...     returncode=1,
    ...     failure=FailureKind.TargetNotFound,
    ...     diagnostic="can't find session: nope",
    ... )
    >>> failed.ok
    False
    >>> failed.raise_for_failure()
    Traceback (most recent call last):
    ...
    tmuxlib.exc.TargetNotFound: can't find session: nope (command: tmux kill-session -t =nope)
    """

    argv: list[str]
    stdout: list[str] = dataclasses.field(default_factory=list)
    stderr: list[str] = dataclasses.field(default_factory=list)
    returncode: int | None = 0
    failure: FailureKind | None = None
    diagnostic: str = ""

    @property
    def ok(self) -> bool:
        """Return True if the invocation succeeded."""
        return self.failure is None

    @classmethod
    def from_process(
        cls,
        argv: Sequence[str],
        stdout: Sequence[str],
        stderr: Sequence[str],
        returncode: int,
    ) -> CommandResult:
        """Build a result from a finished process, classifying any failure."""
        failure: FailureKind | None = None
        diagnostic = "\n".join(stderr)
        if returncode != 0 or stderr:
            failure = classify_stderr(stderr)
            if not diagnostic:
                diagnostic = f"tmux exited with status {returncode}"
        return cls(
            argv=list(argv),
            stdout=list(stdout),
            stderr=list(stderr),
            returncode=returncode,
            failure=failure,
            diagnostic=diagnostic,
        )

    @classmethod
    def from_exception(
        cls,
        error: exc.TmuxLibException,
        argv: Sequence[str] = (),
    ) -> CommandResult:
        """Wrap a locally detected error, no process involved."""
        return cls(
            argv=list(argv),
            returncode=None,
            failure=error.kind or FailureKind.ToolError,
            diagnostic=str(error),
        )

    def to_exception(self) -> exc.TmuxLibException | None:
        """Return the exception matching :attr:`failure`, or None on success."""
        if self.failure is None:
            return None
        if self.failure is FailureKind.InvalidParameter:
            return exc.InvalidParameter(self.diagnostic)
        if self.failure is FailureKind.MalformedRecord:
            return exc.MalformedRecord(0, "\n".join(self.stdout), self.diagnostic)
        error_cls = t.cast(
            "type[exc.CommandFailure]",
            exc.FAILURE_EXCEPTIONS[self.failure],
        )
        return error_cls(self.diagnostic, argv=self.argv, stderr=self.stderr)

    def raise_for_failure(self) -> None:
        """Raise the classified exception if the invocation failed."""
        error = self.to_exception()
        if error is not None:
            raise error


class CmdProtocol(t.Protocol):
    """Command protocol for tmux command."""

    def __call__(
        self,
        cmd: str,
        *args: t.Any,
        target: str | None = None,
        format: str | None = None,
        then: Sequence[str] | None = None,
    ) -> CommandResult:
        """Wrap :meth:`tmuxlib.server.Server.cmd`."""
        ...


class CmdMixin:
    """Command mixin for tmux command."""

    cmd: CmdProtocol


def classify_stderr(stderr: Sequence[str]) -> FailureKind:
    """Map tmux's error text onto a :class:`FailureKind`.

    Examples
    --------
    >>> classify_stderr(["can't find session: main"])
    <FailureKind.TargetNotFound: 'TARGET_NOT_FOUND'>
    >>> classify_stderr(["no server running on /tmp/tmux-1000/default"])
    <FailureKind.TargetNotFound: 'TARGET_NOT_FOUND'>
    >>> classify_stderr(["unknown command: frobnicate"])
    <FailureKind.ToolError: 'TOOL_ERROR'>
    """
    text = "\n".join(stderr).lower()
    if any(message in text for message in TARGET_NOT_FOUND_MESSAGES):
        return FailureKind.TargetNotFound
    return FailureKind.ToolError


def tmux_cmd(*args: t.Any) -> CommandResult:
    """Run any :term:`tmux(1)` command through :py:mod:`subprocess`.

    Convenience wrapper around :class:`~tmuxlib._internal.engines.SubprocessCommandRunner`
    for calls that are not bound to a :class:`~tmuxlib.server.Server`.
    """
    from tmuxlib._internal.engines import SubprocessCommandRunner

    return SubprocessCommandRunner().run(args)


def escape_argument(arg: str) -> str:
    r"""Keep a trailing ``;`` from being read as a command separator.

    tmux strips a ``;`` ending any argument and starts a new command there;
    ``\;`` comes through as a literal ``;``.

    Examples
    --------
    >>> escape_argument("echo hi;")
    'echo hi\\;'
    >>> escape_argument(";")
    '\\;'
    >>> escape_argument("a;b")
    'a;b'
    """
    if arg.endswith(";"):
        return f"{arg[:-1]}\\;"
    return arg


#
# Validation
#
def session_check_name(session_name: str | None) -> None:
    """Raise exception session name invalid, modeled after tmux function.

    tmux(1) session names may not be empty, or include periods or colons.
    These delimiters are reserved for noting session, window and pane.

    Parameters
    ----------
    session_name : str
        Name of session.

    Raises
    ------
    :exc:`exc.BadSessionName`
        Invalid session name.
    """
    if session_name is None or session_name == "":
        raise exc.BadSessionName(reason="empty", session_name=session_name)
    if not isinstance(session_name, str):
        raise exc.BadSessionName(reason="not a string", session_name=repr(session_name))
    if "." in session_name:
        raise exc.BadSessionName(reason="contains periods", session_name=session_name)
    if ":" in session_name:
        raise exc.BadSessionName(reason="contains colons", session_name=session_name)
    if _CONTROL_CHARS_RE.search(session_name):
        raise exc.BadSessionName(
            reason="contains control characters",
            session_name=session_name,
        )
    if FORMAT_SEPARATOR in session_name:
        raise exc.BadSessionName(
            reason="contains the format separator",
            session_name=session_name,
        )


def check_name(name: str | None, what: str = "name") -> None:
    """Raise :exc:`exc.InvalidParameter` unless *name* is a usable tmux name.

    Names must be non-empty and free of newlines and other control characters.
    """
    if not isinstance(name, str) or len(name) == 0:
        msg = f"{what} must be a non-empty string, got {name!r}"
        raise exc.InvalidParameter(msg)
    if _CONTROL_CHARS_RE.search(name):
        msg = f"{what} may not contain control characters: {name!r}"
        raise exc.InvalidParameter(msg)
    if FORMAT_SEPARATOR in name:
        msg = f"{what} may not contain {FORMAT_SEPARATOR!r}: {name!r}"
        raise exc.InvalidParameter(msg)


def check_dimension(value: t.Any, what: str) -> None:
    """Raise :exc:`exc.InvalidParameter` unless *value* is a positive int."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        msg = f"{what} must be a positive integer, got {value!r}"
        raise exc.InvalidParameter(msg)


def check_index(value: t.Any, what: str) -> None:
    """Raise :exc:`exc.InvalidParameter` unless *value* is a non-negative int."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        msg = f"{what} must be a non-negative integer, got {value!r}"
        raise exc.InvalidParameter(msg)


#
# Versions
#
def version_key(version: str) -> tuple[int, ...]:
    """Return a comparable key for a tmux version string.

    Letters and dashes are dropped, so ``3.2a`` compares equal to ``3.2`` and
    ``next-3.5`` to ``3.5``.

    >>> version_key("3.2a")
    (3, 2)
    >>> version_key("next-3.5") > version_key("3.4")
    True
    """
    version = re.sub(r"[a-z-]", "", version)
    return tuple(int(part) for part in version.split(".") if part.isdigit())


def get_version() -> str:
    """Return tmux version.

    If tmux is built from git master, the version returned will be the latest
    version appended with -master, e.g. ``3.6-master``.

    If using OpenBSD's base system tmux, the version will have ``-openbsd``
    appended to the latest version, e.g. ``3.6-openbsd``.

    Raises
    ------
    :exc:`exc.LaunchFailure`
        tmux could not be started.
    :exc:`exc.VersionTooLow`
        tmux did not understand ``-V``.
    """
    proc = tmux_cmd("-V")
    if proc.failure is FailureKind.LaunchFailure:
        proc.raise_for_failure()
    if proc.stderr:
        if proc.stderr[0] == "tmux: unknown option -- V":
            if sys.platform.startswith("openbsd"):  # openbsd has no tmux -V
                return f"{TMUX_MAX_VERSION}-openbsd"
            msg = (
                f"tmuxlib supports tmux {TMUX_MIN_VERSION} and greater. This system"
                " does not meet the minimum tmux version requirement."
            )
            raise exc.VersionTooLow(msg)
        raise exc.VersionTooLow(proc.stderr)

    version = proc.stdout[0].split("tmux ")[1]

    # Allow latest tmux HEAD
    if version == "master":
        return f"{TMUX_MAX_VERSION}-master"

    return version


def has_version(version: str) -> bool:
    """Return True if tmux version installed."""
    return version_key(get_version()) == version_key(version)


def has_gte_version(min_version: str) -> bool:
    """Return True if tmux version greater or equal to minimum."""
    return version_key(get_version()) >= version_key(min_version)


def has_lt_version(max_version: str) -> bool:
    """Return True if tmux version less than maximum."""
    return version_key(get_version()) < version_key(max_version)


def has_minimum_version(raises: bool = True) -> bool:
    """Return True if tmux meets version requirement. Version >= 3.2a.

    Parameters
    ----------
    raises : bool
        raise exception if below minimum version requirement

    Raises
    ------
    :exc:`exc.VersionTooLow`
        tmux version below minimum required for tmuxlib
    """
    version = get_version()
    if version_key(version) < version_key(TMUX_MIN_VERSION):
        if raises:
            msg = (
                f"tmuxlib only supports tmux {TMUX_MIN_VERSION} and greater. This "
                f"system has {version} installed. Upgrade your tmux to use tmuxlib."
            )
            raise exc.VersionTooLow(msg)
        return False
    return True
