"""Operations that change tmux state.

tmuxlib.mutations
~~~~~~~~~~~~~~~~~

Every operation validates its parameters locally, then issues exactly one tmux
invocation and returns its :class:`~tmuxlib.common.CommandResult`. Nothing is
re-queried afterwards: to observe the new state, query the server again.

A parameter rejected locally yields a result with
``failure=FailureKind.InvalidParameter`` and no process is started.
"""

from __future__ import annotations

import logging
import pathlib
import typing as t

from tmuxlib import exc
from tmuxlib.common import (
    CmdMixin,
    CommandResult,
    check_dimension,
    check_index,
    check_name,
    session_check_name,
)
from tmuxlib.constants import PANE_DIRECTION_FLAG_MAP, PaneDirection
from tmuxlib.targets import (
    as_pane_target,
    as_session_target,
    as_window_or_pane_target,
    as_window_target,
)

if t.TYPE_CHECKING:
    from tmuxlib._internal.types import StrPath
    from tmuxlib.targets import PaneLike, SessionLike, WindowLike

logger = logging.getLogger(__name__)


def _rejected(error: exc.TmuxLibException) -> CommandResult:
    logger.debug("rejected before invoking tmux: %s", error)
    return CommandResult.from_exception(error)


def _check_size(size: str | int, what: str) -> None:
    """Accept a positive cell count or a percentage such as ``"30%"``."""
    if isinstance(size, str) and size.endswith("%") and size[:-1].isdigit():
        if not 0 < int(size[:-1]) <= 100:
            msg = f"{what} percentage must be within 1-100%, got {size!r}"
            raise exc.InvalidParameter(msg)
        return
    check_dimension(size, what)


class MutationsMixin(CmdMixin):
    """Typed mutations of sessions, windows and panes."""

    #
    # Sessions
    #
    def new_session(
        self,
        session_name: str,
        *,
        start_directory: StrPath | None = None,
        window_name: str | None = None,
        width: int | None = None,
        height: int | None = None,
    ) -> CommandResult:
        """Create a detached session ``$ tmux new-session -d``.

        On success ``stdout[0]`` holds the new ``session_id`` (``$N``).

        Parameters
        ----------
        session_name : str
            Name of the session. May not be empty, contain periods, colons or
            control characters.
        start_directory : str or PathLike, optional
            Working directory of the first pane.
        window_name : str, optional
            Name of the first window.
        width, height : int, optional
            Initial size of the session.
        """
        args: list[str] = ["-d", "-P", "-s", session_name]
        try:
            session_check_name(session_name)
            if window_name is not None:
                check_name(window_name, "window_name")
                args += ["-n", window_name]
            if start_directory is not None:
                args += ["-c", str(pathlib.Path(start_directory).expanduser())]
            if width is not None:
                check_dimension(width, "width")
                args += ["-x", str(width)]
            if height is not None:
                check_dimension(height, "height")
                args += ["-y", str(height)]
        except exc.InvalidParameter as e:
            return _rejected(e)

        return self.cmd("new-session", *args, format="#{session_id}")

    def rename_session(self, session: SessionLike, new_name: str) -> CommandResult:
        """Rename a session ``$ tmux rename-session``."""
        try:
            target = as_session_target(session)
            session_check_name(new_name)
        except exc.InvalidParameter as e:
            return _rejected(e)

        return self.cmd("rename-session", new_name, target=target.target)

    def kill_session(self, session: SessionLike) -> CommandResult:
        """Kill a session ``$ tmux kill-session``."""
        try:
            target = as_session_target(session)
        except exc.InvalidParameter as e:
            return _rejected(e)

        return self.cmd("kill-session", target=target.target)

    def switch_client(self, session: SessionLike) -> CommandResult:
        """Switch the current client to *session* ``$ tmux switch-client``."""
        try:
            target = as_session_target(session)
        except exc.InvalidParameter as e:
            return _rejected(e)

        return self.cmd("switch-client", target=target.target)

    def kill_server(self) -> CommandResult:
        """Kill the tmux server ``$ tmux kill-server``."""
        return self.cmd("kill-server")

    #
    # Windows
    #
    def new_window(
        self,
        session: SessionLike,
        *,
        window_name: str | None = None,
        start_directory: StrPath | None = None,
        window_index: int | None = None,
        attach: bool = False,
    ) -> CommandResult:
        """Create a window in *session* ``$ tmux new-window``.

        On success ``stdout[0]`` holds the new ``window_id`` (``@N``).

        Parameters
        ----------
        window_index : int, optional
            Index for the window. The next free index when omitted.
        attach : bool, optional
            Make the new window the current window, default False.
        """
        args: list[str] = ["-P"]
        try:
            session_target = as_session_target(session)
            if window_name is not None:
                check_name(window_name, "window_name")
                args += ["-n", window_name]
            if window_index is not None:
                check_index(window_index, "window_index")
            if start_directory is not None:
                args += ["-c", str(pathlib.Path(start_directory).expanduser())]
        except exc.InvalidParameter as e:
            return _rejected(e)

        if not attach:
            args.append("-d")

        target = f"{session_target.target}:"
        if window_index is not None:
            target += str(window_index)

        return self.cmd("new-window", *args, target=target, format="#{window_id}")

    def rename_window(self, window: WindowLike, new_name: str) -> CommandResult:
        """Rename a window ``$ tmux rename-window``."""
        try:
            target = as_window_target(window)
            check_name(new_name, "new_name")
        except exc.InvalidParameter as e:
            return _rejected(e)

        return self.cmd("rename-window", new_name, target=target.target)

    def resize_window(
        self,
        window: WindowLike,
        *,
        height: int | None = None,
        width: int | None = None,
    ) -> CommandResult:
        """Resize a window ``$ tmux resize-window -x <width> -y <height>``."""
        try:
            target = as_window_target(window)
            args = self._dimension_args(height=height, width=width)
        except exc.InvalidParameter as e:
            return _rejected(e)

        return self.cmd("resize-window", *args, target=target.target)

    def move_window(
        self,
        window: WindowLike,
        destination_session: SessionLike,
        destination_index: int | None = None,
    ) -> CommandResult:
        """Move a window to another session or index ``$ tmux move-window``.

        Parameters
        ----------
        destination_session : str or session target
            Session receiving the window.
        destination_index : int, optional
            Index in the destination session. The next free index when omitted.
        """
        try:
            source = as_window_target(window)
            destination = as_session_target(destination_session)
            if destination_index is not None:
                check_index(destination_index, "destination_index")
        except exc.InvalidParameter as e:
            return _rejected(e)

        target = f"{destination.target}:"
        if destination_index is not None:
            target += str(destination_index)

        return self.cmd("move-window", "-s", source.target, target=target)

    def kill_window(self, window: WindowLike) -> CommandResult:
        """Kill a window ``$ tmux kill-window``."""
        try:
            target = as_window_target(window)
        except exc.InvalidParameter as e:
            return _rejected(e)

        return self.cmd("kill-window", target=target.target)

    def select_window(self, window: WindowLike) -> CommandResult:
        """Make *window* the current window of its session ``$ tmux select-window``."""
        try:
            target = as_window_target(window)
        except exc.InvalidParameter as e:
            return _rejected(e)

        return self.cmd("select-window", target=target.target)

    def select_layout(self, window: WindowLike, layout: str) -> CommandResult:
        """Apply a layout to a window ``$ tmux select-layout``.

        Parameters
        ----------
        layout : str
            A preset such as ``even-horizontal``, ``main-vertical`` or
            ``tiled``, or a layout string previously read from
            :attr:`Window.layout <tmuxlib.window.Window.layout>`.
        """
        try:
            target = as_window_target(window)
            check_name(layout, "layout")
        except exc.InvalidParameter as e:
            return _rejected(e)

        return self.cmd("select-layout", layout, target=target.target)

    def split_window(
        self,
        target: WindowLike | PaneLike,
        *,
        direction: PaneDirection | None = None,
        size: str | int | None = None,
        start_directory: StrPath | None = None,
        full_window_split: bool = False,
        attach: bool = False,
    ) -> CommandResult:
        """Split a window or pane ``$ tmux split-window``, by default beneath.

        On success ``stdout[0]`` holds the new ``pane_id`` (``%N``).

        Parameters
        ----------
        target : window or pane target
            A window splits its active pane.
        direction : PaneDirection, optional
            split in direction. If none is specified, assume down.
        size : int or str, optional
            Cells, or a percentage such as ``"30%"``, of the new pane.
        full_window_split : bool, optional
            split across full window width or height, rather than active pane.
        attach : bool, optional
            Make the new pane the active pane, default False.
        """
        tmux_args: list[str] = []
        try:
            target_str = as_window_or_pane_target(target).target
            tmux_args += PANE_DIRECTION_FLAG_MAP[direction or PaneDirection.Below]
            if size is not None:
                _check_size(size, "size")
                tmux_args += ["-l", str(size)]
            if start_directory is not None:
                tmux_args += ["-c", str(pathlib.Path(start_directory).expanduser())]
        except exc.InvalidParameter as e:
            return _rejected(e)

        if full_window_split:
            tmux_args.append("-f")
        if not attach:
            tmux_args.append("-d")
        tmux_args.append("-P")

        return self.cmd(
            "split-window",
            *tmux_args,
            target=target_str,
            format="#{pane_id}",
        )

    #
    # Panes
    #
    def resize_pane(
        self,
        pane: PaneLike,
        *,
        height: int | None = None,
        width: int | None = None,
    ) -> CommandResult:
        """Resize a pane ``$ tmux resize-pane -x <width> -y <height>``.

        Parameters
        ----------
        height : int, optional
            Rows, positive.
        width : int, optional
            Columns, positive.
        """
        try:
            target = as_pane_target(pane)
            args = self._dimension_args(height=height, width=width)
        except exc.InvalidParameter as e:
            return _rejected(e)

        return self.cmd("resize-pane", *args, target=target.target)

    def kill_pane(self, pane: PaneLike) -> CommandResult:
        """Kill a pane ``$ tmux kill-pane``."""
        try:
            target = as_pane_target(pane)
        except exc.InvalidParameter as e:
            return _rejected(e)

        return self.cmd("kill-pane", target=target.target)

    def select_pane(self, pane: PaneLike) -> CommandResult:
        """Make *pane* the active pane of its window ``$ tmux select-pane``."""
        try:
            target = as_pane_target(pane)
        except exc.InvalidParameter as e:
            return _rejected(e)

        return self.cmd("select-pane", target=target.target)

    def send_keys(
        self,
        pane: PaneLike,
        keys: str,
        *,
        literal: bool = True,
        enter: bool = False,
    ) -> CommandResult:
        r"""``$ tmux send-keys`` to the pane.

        Parameters
        ----------
        keys : str
            Text, or with ``literal=False`` a tmux key name such as ``C-c``.
        literal : bool, optional
            Send *keys* as literal UTF-8 characters (``-l``), default True.
        enter : bool, optional
            Press Enter afterwards, default False. Sent as a second command
            within the same tmux invocation.
        """
        try:
            target = as_pane_target(pane)
            if not isinstance(keys, str) or keys == "":
                msg = f"keys must be a non-empty string, got {keys!r}"
                raise exc.InvalidParameter(msg)
        except exc.InvalidParameter as e:
            return _rejected(e)

        args: list[str] = ["-l"] if literal else []
        args += ["--", keys]
        then = ["send-keys", "-t", target.target, "Enter"] if enter else None

        return self.cmd("send-keys", *args, target=target.target, then=then)

    @staticmethod
    def _dimension_args(
        height: int | None,
        width: int | None,
    ) -> list[str]:
        if height is None and width is None:
            msg = "height or width is required"
            raise exc.InvalidParameter(msg)
        args: list[str] = []
        if width is not None:
            check_dimension(width, "width")
            args += ["-x", str(width)]
        if height is not None:
            check_dimension(height, "height")
            args += ["-y", str(height)]
        return args
