"""Wrapper for :term:`tmux(1)` server.

tmuxlib.server
~~~~~~~~~~~~~~

"""

from __future__ import annotations

import logging
import os
import typing as t

from tmuxlib import exc
from tmuxlib._internal.engines import SubprocessCommandRunner
from tmuxlib.capture import cleanup_captured_buffer
from tmuxlib.client import Client
from tmuxlib.common import escape_argument
from tmuxlib.constants import NO_SERVER_MESSAGES, FailureKind
from tmuxlib.formats import (
    CLIENT_FIELDS,
    PANE_FIELDS,
    SESSION_FIELDS,
    WINDOW_FIELDS,
    decode,
)
from tmuxlib.mutations import MutationsMixin
from tmuxlib.neo import fetch_objs, fetch_raw
from tmuxlib.options import OptionsMixin
from tmuxlib.pane import Pane
from tmuxlib.session import Session
from tmuxlib.targets import as_pane_target, as_session_target, as_window_target
from tmuxlib.window import Window

if t.TYPE_CHECKING:
    import pathlib
    import types
    from collections.abc import Sequence

    from tmuxlib._internal.command_runner import CommandRunner
    from tmuxlib.common import CommandResult
    from tmuxlib.formats import Field
    from tmuxlib.neo import ListCmd, OutputsRaw
    from tmuxlib.targets import PaneLike, SessionLike, WindowLike

logger = logging.getLogger(__name__)


def _is_no_server(error: exc.CommandFailure) -> bool:
    text = "\n".join(error.stderr).lower()
    return any(message in text for message in NO_SERVER_MESSAGES)


class Server(OptionsMixin, MutationsMixin):
    """:term:`tmux(1)` :term:`Server` [server_manual]_.

    A handle on one tmux server, addressed by socket. It holds no state about
    sessions, windows or panes: every query issues exactly one tmux invocation
    and returns fresh snapshots, every mutation issues exactly one invocation
    and returns its :class:`~tmuxlib.common.CommandResult`.

    Queries raise :class:`~tmuxlib.exc.TmuxLibException` subclasses on
    failure. Mutations never raise for tmux errors.

    Parameters
    ----------
    socket_name : str, optional
    socket_path : str, optional
    config_file : str, optional
    tmux_bin : str, optional
        tmux binary for the default :class:`SubprocessCommandRunner`.
    command_runner : :class:`~tmuxlib._internal.command_runner.CommandRunner`, optional
        Engine executing tmux, e.g. a fake in tests.

    Examples
    --------
    >>> server
    Server(socket_name=tmuxlib_test...)

    >>> server.list_sessions()
    [Session($... ...)]

    >>> server.list_windows(server.list_sessions()[0])
    [Window(@... 1:..., ...)]

    References
    ----------
    .. [server_manual] CLIENTS AND SESSIONS. openbsd manpage for TMUX(1)
           "The tmux server manages clients, sessions, windows and panes.
           Clients are attached to sessions to interact with them, either when
           they are created with the new-session command, or later with the
           attach-session command. Each session has one or more windows linked
           into it. Windows may be linked to multiple sessions and are made up
           of one or more panes, each of which contains a pseudo terminal."

       https://man.openbsd.org/tmux.1#CLIENTS_AND_SESSIONS.
    """

    socket_name: str | None = None
    """Passthrough to ``[-L socket-name]``"""
    socket_path: str | None = None
    """Passthrough to ``[-S socket-path]``"""
    config_file: str | None = None
    """Passthrough to ``[-f file]``"""

    def __init__(
        self,
        socket_name: str | None = None,
        socket_path: str | pathlib.Path | None = None,
        config_file: str | None = None,
        tmux_bin: str | None = None,
        command_runner: CommandRunner | None = None,
    ) -> None:
        if socket_path is not None:
            self.socket_path = str(socket_path)
        elif socket_name is not None:
            self.socket_name = socket_name

        if config_file:
            self.config_file = config_file

        self.tmux_bin = tmux_bin
        self._command_runner = command_runner

    def __enter__(self) -> Server:
        """Enter the context, returning self."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        """Exit the context, killing the server if it exists."""
        if self.is_alive():
            self.kill_server()

    @property
    def command_runner(self) -> CommandRunner:
        """Engine used for every tmux invocation.

        Lazily created :class:`SubprocessCommandRunner` unless one was passed in.
        """
        if self._command_runner is None:
            self._command_runner = SubprocessCommandRunner(tmux_bin=self.tmux_bin)
        return self._command_runner

    @command_runner.setter
    def command_runner(self, value: CommandRunner) -> None:
        self._command_runner = value

    #
    # Command
    #
    def cmd(
        self,
        cmd: str,
        *args: t.Any,
        target: str | None = None,
        format: str | None = None,
        then: Sequence[str] | None = None,
    ) -> CommandResult:
        """Execute tmux command respective of socket name and file, return output.

        Examples
        --------
        >>> server.cmd('display-message', '-p', 'hi').stdout
        ['hi']

        New session:

        >>> server.cmd('new-session', '-d', '-P', format='#{session_id}').stdout[0]
        '$...'

        Parameters
        ----------
        target : str, optional
            Passed as ``-t <target>`` right after the command name.
        format : str, optional
            Passed as ``-F<format>`` after all other arguments.
        then : list of str, optional
            A second command, run by the same tmux invocation after a ``;``
            separator.

        Returns
        -------
        :class:`~tmuxlib.common.CommandResult`
        """
        svr_args: list[str] = [cmd]
        if self.socket_name:
            svr_args.insert(0, f"-L{self.socket_name}")
        if self.socket_path:
            svr_args.insert(0, f"-S{self.socket_path}")
        if self.config_file:
            svr_args.insert(0, f"-f{self.config_file}")

        cmd_args = ["-t", str(target), *args] if target is not None else [*args]
        cmd_args = [escape_argument(str(arg)) for arg in cmd_args]
        if then:
            cmd_args += [";", *(escape_argument(str(arg)) for arg in then)]

        return self.command_runner.run([*svr_args, *cmd_args], format=format)

    def is_alive(self) -> bool:
        """Return True if tmux server alive.

        >>> tmux = Server(socket_name="no_exist")
        >>> assert not tmux.is_alive()
        """
        return self.cmd("list-sessions").ok

    #
    # Queries
    #
    def _fetch_all(
        self,
        list_cmd: ListCmd,
        fields: Sequence[Field],
        list_extra_args: Sequence[str] | None = None,
    ) -> OutputsRaw:
        """Fetch server-wide records, no server counting as none."""
        try:
            return fetch_objs(
                self.cmd,
                list_cmd=list_cmd,
                fields=fields,
                list_extra_args=list_extra_args,
            )
        except exc.TargetNotFound as e:
            if _is_no_server(e):
                logger.debug("no tmux server running for %r", self)
                return []
            raise

    def _fetch_one(self, fields: Sequence[Field], target: str) -> OutputsRaw:
        """Fetch the record of one target, none if the target does not exist."""
        try:
            return fetch_objs(
                self.cmd,
                list_cmd="display-message",
                fields=fields,
                list_extra_args=["-p"],
                target=target,
            )
        except exc.TargetNotFound:
            logger.debug("%s not found on %r", target, self)
            return []

    def list_sessions(self) -> list[Session]:
        """Return every session, ``$ tmux list-sessions``.

        An empty list when no server is running.

        Raises
        ------
        :exc:`exc.LaunchFailure`, :exc:`exc.ToolError`, :exc:`exc.MalformedRecord`
        """
        return [
            Session.from_record(obj)
            for obj in self._fetch_all("list-sessions", SESSION_FIELDS)
        ]

    def list_windows(self, session: SessionLike) -> list[Window]:
        """Return the windows of *session*, ``$ tmux list-windows -t``.

        Raises
        ------
        :exc:`exc.TargetNotFound`
            The session does not exist.
        :exc:`exc.InvalidParameter`
            *session* is not a valid session target.
        """
        target = as_session_target(session)
        return [
            Window.from_record(obj)
            for obj in fetch_objs(
                self.cmd,
                list_cmd="list-windows",
                fields=WINDOW_FIELDS,
                target=target.target,
            )
        ]

    def list_panes(self, window: WindowLike) -> list[Pane]:
        """Return the panes of *window*, ``$ tmux list-panes -t``.

        Raises
        ------
        :exc:`exc.TargetNotFound`
            The session or window does not exist.
        :exc:`exc.InvalidParameter`
            *window* is not a valid window target.
        """
        target = as_window_target(window)
        return [
            Pane.from_record(obj)
            for obj in fetch_objs(
                self.cmd,
                list_cmd="list-panes",
                fields=PANE_FIELDS,
                target=target.target,
            )
        ]

    def list_all_windows(self) -> list[Window]:
        """Return the windows of every session, ``$ tmux list-windows -a``."""
        return [
            Window.from_record(obj)
            for obj in self._fetch_all("list-windows", WINDOW_FIELDS, ["-a"])
        ]

    def list_all_panes(self) -> list[Pane]:
        """Return the panes of every session, ``$ tmux list-panes -a``."""
        return [
            Pane.from_record(obj)
            for obj in self._fetch_all("list-panes", PANE_FIELDS, ["-a"])
        ]

    def get_session(self, session: SessionLike) -> Session | None:
        """Return a fresh snapshot of *session*, or None if it does not exist."""
        target = as_session_target(session)
        # trailing colon: resolve as a session, not as a pane name
        for obj in self._fetch_one(SESSION_FIELDS, f"{target.target}:"):
            return Session.from_record(obj)
        return None

    def get_window(self, window: WindowLike) -> Window | None:
        """Return a fresh snapshot of *window*.

        None if the window, or its session, does not exist.
        """
        target = as_window_target(window)
        for obj in self._fetch_one(WINDOW_FIELDS, target.target):
            return Window.from_record(obj)
        return None

    def get_pane(self, pane: PaneLike) -> Pane | None:
        """Return a fresh snapshot of *pane*.

        None if the pane, its window or its session does not exist.
        """
        target = as_pane_target(pane)
        for obj in self._fetch_one(PANE_FIELDS, target.target):
            return Pane.from_record(obj)
        return None

    def has_session(self, session: SessionLike) -> bool:
        """Return True if session exists, ``$ tmux has-session``.

        Parameters
        ----------
        session : str or session target
            Session name, matched exactly.

        Raises
        ------
        :exc:`exc.BadSessionName`
        """
        target = as_session_target(session)
        proc = self.cmd("has-session", target=target.target)
        if proc.failure is FailureKind.TargetNotFound:
            return False
        proc.raise_for_failure()
        return True

    def current_client(self) -> Client:
        """Return the sessions of the client tmux considers current.

        ``$ tmux display-message -p``

        Raises
        ------
        :exc:`exc.TargetNotFound`
            No server, or no client to report on.
        :exc:`exc.MalformedRecord`
            tmux reported no session for the client.
        """
        proc = fetch_raw(
            self.cmd,
            list_cmd="display-message",
            fields=CLIENT_FIELDS,
            list_extra_args=["-p"],
        )
        proc.raise_for_failure()
        objs = decode(proc.stdout, CLIENT_FIELDS)
        if not objs or not objs[0]["client_session"]:
            raise exc.MalformedRecord(
                line_index=0,
                line="\n".join(proc.stdout),
                reason="client_session is empty",
            )
        return Client.from_record(objs[0])

    def capture_pane(
        self,
        pane: PaneLike,
        start: t.Literal["-"] | int | None = None,
        end: t.Literal["-"] | int | None = None,
        drop_last_lines: int = 0,
    ) -> str:
        """Capture the contents of *pane* with escape sequences.

        ``$ tmux capture-pane -p -e -J``, cleaned with
        :func:`~tmuxlib.capture.cleanup_captured_buffer`.

        Parameters
        ----------
        start : str or int, optional
            First line, negative numbers are history. ``"-"`` is the start of
            the history.
        end : str or int, optional
            Last line. ``"-"`` is the end of the visible pane.
        drop_last_lines : int, optional
            Lines to remove from the end of the capture, e.g. a prompt.
        """
        target = as_pane_target(pane)
        args: list[str] = ["-p", "-e", "-J"]
        if start is not None:
            args += ["-S", str(start)]
        if end is not None:
            args += ["-E", str(end)]
        proc = self.cmd("capture-pane", *args, target=target.target)
        proc.raise_for_failure()
        return cleanup_captured_buffer(
            "\n".join(proc.stdout),
            drop_last_lines=drop_last_lines,
        )

    #
    # Dunder
    #
    def __eq__(self, other: object) -> bool:
        """Equal operator for :class:`Server` object."""
        if isinstance(other, Server):
            return (
                self.socket_name == other.socket_name
                and self.socket_path == other.socket_path
            )
        return False

    def __hash__(self) -> int:
        return hash((self.socket_name, self.socket_path))

    def __repr__(self) -> str:
        """Representation of :class:`Server` object."""
        if self.socket_name is not None:
            return f"{self.__class__.__name__}(socket_name={self.socket_name})"
        if self.socket_path is not None:
            return f"{self.__class__.__name__}(socket_path={self.socket_path})"
        return (
            f"{self.__class__.__name__}(socket_path=/tmp/tmux-{os.geteuid()}/default)"
        )
