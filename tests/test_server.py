"""Tests for the :class:`~tmuxlib.server.Server` queries, driven by a fake runner."""

from __future__ import annotations

import datetime
import typing as t

import pytest

import tmuxlib.neo
from tests.helpers import NO_SERVER, FakeCommandRunner, Reply, line
from tmuxlib import exc
from tmuxlib.client import Client
from tmuxlib.formats import (
    CLIENT_FIELDS,
    PANE_FIELDS,
    SESSION_FIELDS,
    WINDOW_FIELDS,
    build_format,
)
from tmuxlib.pane import Pane
from tmuxlib.server import Server
from tmuxlib.session import Session
from tmuxlib.targets import PaneTarget, SessionTarget, WindowTarget
from tmuxlib.window import Window

SESSION_LINE = line("main", "$1", 1, 2, 1700000000, "/home/user")
WINDOW_LINE = line("main", 1, "@1", "editor", 1, "c2ae,80x24,0,0,0", 2)
PANE_LINE = line("main", 1, 0, "%1", 24, 80, "/home/user", "vim", 1)


def test_list_sessions(fake_server: Server, fake_runner: FakeCommandRunner) -> None:
    """One invocation yields typed snapshots."""
    fake_runner.replies.append(
        Reply(stdout=[SESSION_LINE, line("logs", "$2", 0, 1, 1700000100, "/var/log")]),
    )
    sessions = fake_server.list_sessions()

    assert len(fake_runner.calls) == 1
    assert fake_runner.calls[0].args == ["-Lfake", "list-sessions"]
    assert fake_runner.calls[0].format == build_format(SESSION_FIELDS)

    assert sessions == [
        Session(
            session_name="main",
            session_id="$1",
            attached=True,
            windows=2,
            created=datetime.datetime.fromtimestamp(
                1700000000,
                tz=datetime.timezone.utc,
            ),
            path="/home/user",
        ),
        Session(
            session_name="logs",
            session_id="$2",
            attached=False,
            windows=1,
            created=datetime.datetime.fromtimestamp(
                1700000100,
                tz=datetime.timezone.utc,
            ),
            path="/var/log",
        ),
    ]
    assert sessions[0].target == SessionTarget("main")
    assert repr(sessions[0]) == "Session($1 main)"


def test_list_sessions_no_server(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
) -> None:
    """No running server means no sessions."""
    fake_runner.replies.append(NO_SERVER)
    assert fake_server.list_sessions() == []
    assert len(fake_runner.calls) == 1


def test_list_sessions_launch_failure_never_decodes(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A binary that could not start raises before any decoding."""

    def fail_decode(*args: t.Any, **kwargs: t.Any) -> t.NoReturn:
        pytest.fail("decode must not run for a failed invocation")

    monkeypatch.setattr(tmuxlib.neo, "decode", fail_decode)
    fake_runner.replies.append(Reply(launch_failure=True))
    with pytest.raises(exc.LaunchFailure):
        fake_server.list_sessions()


def test_list_sessions_tool_error(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
) -> None:
    """Errors other than a missing server propagate."""
    fake_runner.replies.append(Reply(stderr=["server exited unexpectedly"], returncode=1))
    with pytest.raises(exc.ToolError, match="server exited unexpectedly"):
        fake_server.list_sessions()


def test_list_sessions_malformed(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
) -> None:
    """Output that does not match the layout fails the whole query."""
    fake_runner.replies.append(Reply(stdout=[SESSION_LINE, "garbage"]))
    with pytest.raises(exc.MalformedRecord) as exc_info:
        fake_server.list_sessions()
    assert exc_info.value.line_index == 1


def test_list_windows(fake_server: Server, fake_runner: FakeCommandRunner) -> None:
    """Windows are listed for an exact session name."""
    fake_runner.replies.append(Reply(stdout=[WINDOW_LINE]))
    windows = fake_server.list_windows("main")

    assert fake_runner.last_args == ["-Lfake", "list-windows", "-t", "=main"]
    assert fake_runner.calls[0].format == build_format(WINDOW_FIELDS)
    assert windows == [
        Window(
            session_name="main",
            window_index=1,
            window_id="@1",
            window_name="editor",
            active=True,
            layout="c2ae,80x24,0,0,0",
            panes=2,
        ),
    ]
    assert windows[0].target == WindowTarget("main", 1)
    assert windows[0].session == SessionTarget("main")


def test_list_windows_from_snapshot(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
) -> None:
    """A session snapshot can be passed where a target is expected."""
    fake_runner.replies.append(Reply(stdout=[SESSION_LINE]))
    (session,) = fake_server.list_sessions()
    fake_server.list_windows(session)
    assert fake_runner.last_args == ["-Lfake", "list-windows", "-t", "=main"]


def test_list_windows_missing_session(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
) -> None:
    """A session that does not exist is reported as such."""
    fake_runner.replies.append(
        Reply(stderr=["can't find session: gone"], returncode=1),
    )
    with pytest.raises(exc.TargetNotFound):
        fake_server.list_windows("gone")


def test_list_windows_invalid_name(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
) -> None:
    """Malformed identifiers are rejected without invoking tmux."""
    with pytest.raises(exc.InvalidParameter):
        fake_server.list_windows("a.b")
    with pytest.raises(exc.InvalidParameter):
        fake_server.list_windows(t.cast("t.Any", 42))
    assert fake_runner.calls == []


def test_list_panes(fake_server: Server, fake_runner: FakeCommandRunner) -> None:
    """Panes are listed for one window."""
    fake_runner.replies.append(Reply(stdout=[PANE_LINE]))
    panes = fake_server.list_panes(WindowTarget("main", 1))

    assert fake_runner.last_args == ["-Lfake", "list-panes", "-t", "=main:1"]
    assert fake_runner.calls[0].format == build_format(PANE_FIELDS)
    (pane,) = panes
    assert pane.target == PaneTarget("main", 1, 0)
    assert pane.window == WindowTarget("main", 1)
    assert (pane.height, pane.width) == (24, 80)
    assert pane.current_command == "vim"
    assert repr(pane) == "Pane(%1 main:1.0)"


def test_list_all(fake_server: Server, fake_runner: FakeCommandRunner) -> None:
    """Server-wide listings use ``-a``."""
    fake_runner.replies.extend([Reply(stdout=[WINDOW_LINE]), Reply(stdout=[PANE_LINE])])
    assert len(fake_server.list_all_windows()) == 1
    assert fake_runner.last_args == ["-Lfake", "list-windows", "-a"]
    assert len(fake_server.list_all_panes()) == 1
    assert fake_runner.last_args == ["-Lfake", "list-panes", "-a"]


def test_list_all_no_server(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
) -> None:
    """No running server means nothing to list."""
    fake_runner.replies.extend([NO_SERVER, NO_SERVER])
    assert fake_server.list_all_windows() == []
    assert fake_server.list_all_panes() == []


def test_get_session(fake_server: Server, fake_runner: FakeCommandRunner) -> None:
    """One invocation, addressed as a session."""
    fake_runner.replies.append(Reply(stdout=[SESSION_LINE]))
    session = fake_server.get_session("main")

    assert len(fake_runner.calls) == 1
    assert fake_runner.last_args == ["-Lfake", "display-message", "-t", "=main:", "-p"]
    assert session is not None
    assert session.session_id == "$1"


class MissingFixture(t.NamedTuple):
    """Test fixture for lookups of targets that do not exist."""

    test_id: str
    getter: str
    target: t.Any
    stderr: str


MISSING_FIXTURES: list[MissingFixture] = [
    MissingFixture(
        test_id="session",
        getter="get_session",
        target="gone",
        stderr="can't find session: gone",
    ),
    MissingFixture(
        test_id="window",
        getter="get_window",
        target=WindowTarget("main", 9),
        stderr="can't find window: 9",
    ),
    MissingFixture(
        test_id="pane",
        getter="get_pane",
        target=PaneTarget("main", 1, 9),
        stderr="can't find pane: 9",
    ),
    MissingFixture(
        test_id="pane_of_missing_session",
        getter="get_pane",
        target=PaneTarget("gone", 1, 0),
        stderr="can't find session: gone",
    ),
    MissingFixture(
        test_id="no_server",
        getter="get_window",
        target=WindowTarget("main", 1),
        stderr="no server running on /tmp/tmux-1000/fake",
    ),
]


@pytest.mark.parametrize(
    list(MissingFixture._fields),
    MISSING_FIXTURES,
    ids=[test.test_id for test in MISSING_FIXTURES],
)
def test_get_missing(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
    test_id: str,
    getter: str,
    target: t.Any,
    stderr: str,
) -> None:
    """Absent targets, or absent parents, are None rather than errors."""
    fake_runner.replies.append(Reply(stderr=[stderr], returncode=1))
    assert getattr(fake_server, getter)(target) is None
    assert len(fake_runner.calls) == 1


def test_get_window_and_pane(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
) -> None:
    """Windows and panes are re-read through their targets."""
    fake_runner.replies.extend([Reply(stdout=[WINDOW_LINE]), Reply(stdout=[PANE_LINE])])
    window = fake_server.get_window(WindowTarget("main", 1))
    assert fake_runner.last_args[-3:] == ["-t", "=main:1", "-p"]
    pane = fake_server.get_pane(PaneTarget("main", 1, 0))
    assert fake_runner.last_args[-3:] == ["-t", "=main:1.0", "-p"]
    assert isinstance(window, Window)
    assert isinstance(pane, Pane)


def test_get_rejects_malformed_target(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
) -> None:
    """Negative indexes never reach tmux."""
    with pytest.raises(exc.InvalidParameter):
        fake_server.get_pane(PaneTarget("main", 1, -1))
    with pytest.raises(exc.InvalidParameter):
        fake_server.get_window(t.cast("t.Any", "main:1"))
    assert fake_runner.calls == []


def test_has_session(fake_server: Server, fake_runner: FakeCommandRunner) -> None:
    """Existence is one ``has-session`` call."""
    fake_runner.replies.extend(
        [Reply(), Reply(stderr=["can't find session: gone"], returncode=1)],
    )
    assert fake_server.has_session("main") is True
    assert fake_runner.last_args == ["-Lfake", "has-session", "-t", "=main"]
    assert fake_server.has_session("gone") is False


def test_has_session_launch_failure(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
) -> None:
    """Not being able to ask is not the same as a missing session."""
    fake_runner.replies.append(Reply(launch_failure=True))
    with pytest.raises(exc.LaunchFailure):
        fake_server.has_session("main")


def test_is_alive(fake_server: Server, fake_runner: FakeCommandRunner) -> None:
    """Alive when listing sessions works."""
    fake_runner.replies.extend([Reply(stdout=[SESSION_LINE]), NO_SERVER])
    assert fake_server.is_alive()
    assert not fake_server.is_alive()


def test_current_client(fake_server: Server, fake_runner: FakeCommandRunner) -> None:
    """The current client reports its session and the previous one."""
    fake_runner.replies.append(Reply(stdout=[line("main", "logs")]))
    assert fake_server.current_client() == Client("main", "logs")
    assert fake_runner.last_args == ["-Lfake", "display-message", "-p"]
    assert fake_runner.calls[0].format == build_format(CLIENT_FIELDS)


def test_current_client_without_last_session(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
) -> None:
    """A client that never switched has no last session."""
    fake_runner.replies.append(Reply(stdout=[line("main", "")]))
    assert fake_server.current_client().last_session_name == ""


def test_current_client_without_session(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
) -> None:
    """An empty current session is malformed output."""
    fake_runner.replies.append(Reply(stdout=[line("", "")]))
    with pytest.raises(exc.MalformedRecord):
        fake_server.current_client()


def test_capture_pane(fake_server: Server, fake_runner: FakeCommandRunner) -> None:
    """Captured output is cleaned up."""
    fake_runner.replies.append(
        Reply(stdout=["\x1b[31mred\x1b[0m   ", "plain\t", "", "$ "]),
    )
    captured = fake_server.capture_pane(
        PaneTarget("main", 1, 0),
        start="-",
        end=10,
        drop_last_lines=1,
    )
    # the blank line above the prompt stays, only trailing blanks are dropped
    assert captured == "\x1b[31mred\x1b[0m\nplain\n\x1b[0m\n"
    assert fake_runner.last_args == [
        "-Lfake",
        "capture-pane",
        "-t",
        "=main:1.0",
        "-p",
        "-e",
        "-J",
        "-S",
        "-",
        "-E",
        "10",
    ]


def test_capture_pane_missing(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
) -> None:
    """Capturing a pane that does not exist raises."""
    fake_runner.replies.append(Reply(stderr=["can't find pane: 5"], returncode=1))
    with pytest.raises(exc.TargetNotFound):
        fake_server.capture_pane(PaneTarget("main", 1, 5))


def test_server_repr_and_equality() -> None:
    """Servers compare by socket."""
    assert repr(Server(socket_name="work")) == "Server(socket_name=work)"
    assert repr(Server(socket_path="/tmp/s")) == "Server(socket_path=/tmp/s)"
    assert Server(socket_name="work") == Server(socket_name="work")
    assert Server(socket_name="work") != Server(socket_name="play")


def test_queries_do_not_cache(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
) -> None:
    """Every query asks tmux again."""
    fake_runner.replies.extend([Reply(stdout=[SESSION_LINE]), Reply(stdout=[])])
    assert len(fake_server.list_sessions()) == 1
    assert fake_server.list_sessions() == []
    assert len(fake_runner.calls) == 2


def test_cmd_escapes_trailing_semicolon(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
) -> None:
    """An argument ending in ``;`` is not split into a second command."""
    fake_server.cmd("rename-session", "work;", target="=main;")
    assert fake_runner.last_args == [
        "-Lfake",
        "rename-session",
        "-t",
        "=main\\;",
        "work\\;",
    ]


def test_cmd_then_runs_second_command(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
) -> None:
    """Only the separator added for *then* stays a bare ``;``."""
    fake_server.cmd("display-message", ";", then=["display-message", "x;"])
    assert fake_runner.last_args == [
        "-Lfake",
        "display-message",
        "\\;",
        ";",
        "display-message",
        "x\\;",
    ]
    assert len(fake_runner.calls) == 1


def test_list_windows_separator_in_foreign_name(
    fake_server: Server,
    fake_runner: FakeCommandRunner,
) -> None:
    """A window named with the field separator outside tmuxlib cannot be listed."""
    foreign = line("main", 2, "@2", "a␞b", 0, "c2ae,80x24,0,0,1", 1)
    fake_runner.replies.append(Reply(stdout=[WINDOW_LINE, foreign]))
    with pytest.raises(exc.MalformedRecord) as exc_info:
        fake_server.list_windows("main")
    assert exc_info.value.line_index == 1
    assert "expected 7 fields, got 8" in exc_info.value.reason
