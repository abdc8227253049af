"""Constant variables for tmuxlib."""

from __future__ import annotations

import enum


class FailureKind(enum.Enum):
    """Classification of a failed tmux invocation or request."""

    LaunchFailure = "LAUNCH_FAILURE"
    """The tmux binary could not be started (missing, not executable)."""
    ToolError = "TOOL_ERROR"
    """tmux ran and reported an error through its exit status or stderr."""
    MalformedRecord = "MALFORMED_RECORD"
    """tmux output did not match the expected field layout."""
    TargetNotFound = "TARGET_NOT_FOUND"
    """The referenced session, window or pane does not exist."""
    InvalidParameter = "INVALID_PARAMETER"
    """A caller-supplied value was rejected before invoking tmux."""


class PaneDirection(enum.Enum):
    """Used for *direction* in :meth:`Server.split_window()`."""

    Above = "ABOVE"
    Below = "BELOW"  # default with no args
    Right = "RIGHT"
    Left = "LEFT"


PANE_DIRECTION_FLAG_MAP: dict[PaneDirection, list[str]] = {
    # -v is assumed, but for explicitness it is passed
    PaneDirection.Above: ["-v", "-b"],
    PaneDirection.Below: ["-v"],
    PaneDirection.Right: ["-h"],
    PaneDirection.Left: ["-h", "-b"],
}


#: stderr fragments (lowercased) tmux emits when a target cannot be resolved
TARGET_NOT_FOUND_MESSAGES: tuple[str, ...] = (
    "can't find session",
    "can't find window",
    "can't find pane",
    "session not found",
    "window not found",
    "pane not found",
    "no such session",
    "no such window",
    "no current target",
    "no server running",
    "error connecting to",
)

#: stderr fragments meaning no tmux server is listening on the socket
NO_SERVER_MESSAGES: tuple[str, ...] = (
    "no server running",
    "error connecting to",
)


class OptionScope(enum.Enum):
    """Scope used with ``show-option(s)`` commands."""

    Server = "SERVER"
    Session = "SESSION"
    Window = "WINDOW"
    Pane = "PANE"


OPTION_SCOPE_FLAG_MAP: dict[OptionScope, str] = {
    OptionScope.Server: "-s",
    OptionScope.Session: "",
    OptionScope.Window: "-w",
    OptionScope.Pane: "-p",
}
