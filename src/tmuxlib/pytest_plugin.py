"""tmuxlib pytest plugin.

Fixtures start throwaway tmux servers on random sockets so tests never touch
the developer's own server. Every fixture needing tmux skips when it is not
installed.
"""

from __future__ import annotations

import contextlib
import getpass
import logging
import os
import shutil
import typing as t

import pytest

from tmuxlib import exc
from tmuxlib.server import Server
from tmuxlib.test.constants import TEST_SESSION_PREFIX
from tmuxlib.test.random import get_test_session_name, namer

if t.TYPE_CHECKING:
    import pathlib

    from tmuxlib.session import Session

logger = logging.getLogger(__name__)
USING_ZSH = "zsh" in os.getenv("SHELL", "")


def _require_tmux() -> None:
    if shutil.which("tmux") is None:
        pytest.skip("tmux not found on PATH")


@pytest.fixture(scope="session")
def home_path(tmp_path_factory: pytest.TempPathFactory) -> pathlib.Path:
    """Temporary `/home/` path."""
    return tmp_path_factory.mktemp("home")


@pytest.fixture(scope="session")
def home_user_name() -> str:
    """Return default username to set for :func:`user_path` fixture."""
    return getpass.getuser()


@pytest.fixture(scope="session")
def user_path(home_path: pathlib.Path, home_user_name: str) -> pathlib.Path:
    """Ensure and return temporary user directory."""
    p = home_path / home_user_name
    p.mkdir()
    return p


@pytest.fixture(scope="session")
def zshrc(user_path: pathlib.Path) -> pathlib.Path:
    """Suppress ZSH default message.

    Needs a startup file .zshenv, .zprofile, .zshrc, .zlogin.
    """
    p = user_path / ".zshrc"
    p.touch()
    return p


@pytest.fixture(scope="session")
def config_file(user_path: pathlib.Path) -> pathlib.Path:
    """Return fixture for ``.tmux.conf`` configuration.

    - ``base-index -g 1``

    Windows start at index 1, so targets in tests can be asserted reliably.
    """
    c = user_path / ".tmux.conf"
    c.write_text(
        """
set -g base-index 1
    """,
        encoding="utf-8",
    )
    return c


@pytest.fixture
def clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear out environment variables that could leak into tmux shells."""
    for k in os.environ:
        if not any(
            needle in k.lower()
            for needle in [
                "window",
                "tmux",
                "pane",
                "session",
                "pytest",
                "path",
                "pwd",
                "shell",
                "home",
                "xdg",
                "lang",
                "term",
            ]
        ):
            monkeypatch.delenv(k)


@pytest.fixture
def server(
    request: pytest.FixtureRequest,
    config_file: pathlib.Path,
) -> Server:
    """Return new, temporary :class:`tmuxlib.Server`.

    The server is killed once the test finishes.

    >>> from tmuxlib.server import Server

    >>> def test_example(server: Server) -> None:
    ...     assert isinstance(server, Server)
    ...     assert server.new_session('my_session').ok
    ...     assert [s.session_name for s in server.list_sessions()] == ['my_session']
    """
    _require_tmux()
    server = Server(
        socket_name=f"{TEST_SESSION_PREFIX}test{next(namer)}",
        config_file=str(config_file),
    )

    def fin() -> None:
        server.kill_server()

    request.addfinalizer(fin)

    return server


@pytest.fixture
def session_params() -> dict[str, t.Any]:
    """Keyword arguments for :meth:`Server.new_session` in :func:`session`.

    Override in a test module to size the session, e.g.
    ``{"width": 800, "height": 600}``.
    """
    return {}


@pytest.fixture
def session(
    session_params: dict[str, t.Any],
    server: Server,
) -> Session:
    """Return a snapshot of a new, temporary session on :func:`server`.

    >>> from tmuxlib.session import Session

    >>> def test_example(session: Session) -> None:
    ...     assert session.session_name.startswith('tmuxlib_')
    """
    session_name = get_test_session_name(server=server)

    result = server.new_session(session_name, **session_params)
    result.raise_for_failure()

    # switching fails when no client is attached, that is fine
    with contextlib.suppress(exc.TmuxLibException):
        server.switch_client(session_name).raise_for_failure()

    snapshot = server.get_session(session_name)
    assert snapshot is not None
    assert snapshot.session_name == session_name
    return snapshot


@pytest.fixture
def TestServer(
    request: pytest.FixtureRequest,
    config_file: pathlib.Path,
) -> t.Callable[..., Server]:
    """Return a factory of temporary tmux servers that clean up after themselves.

    Each call creates a :class:`Server` on a unique socket. All of them are
    killed when the test completes.

    Examples
    --------
    >>> server = Server()
    >>> server.new_session('first').ok
    True
    >>> server.is_alive()
    True
    >>> server2 = Server()
    >>> server2.socket_name != server.socket_name
    True
    """
    _require_tmux()
    created: list[Server] = []

    def factory(**kwargs: t.Any) -> Server:
        kwargs.setdefault("socket_name", f"{TEST_SESSION_PREFIX}test{next(namer)}")
        kwargs.setdefault("config_file", str(config_file))
        server = Server(**kwargs)
        created.append(server)
        return server

    def fin() -> None:
        for server in created:
            if server.is_alive():
                server.kill_server()

    request.addfinalizer(fin)

    return factory
