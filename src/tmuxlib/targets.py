"""Typed identifiers for tmux sessions, windows and panes.

tmuxlib.targets
~~~~~~~~~~~~~~~

A session is identified by its name, a window by its index within a session
and a pane by its index within a window. Identifiers are only meaningful
relative to the snapshot that produced them: the tmux server can change
between two calls.

:attr:`target` renders the ``-t`` argument. Session names are prefixed with
``=`` so tmux matches them exactly instead of by prefix or :manpage:`fnmatch(3)`.
"""

from __future__ import annotations

import dataclasses
import typing as t

from . import exc
from .common import check_index, session_check_name


@dataclasses.dataclass(frozen=True)
class SessionTarget:
    """Identifier of a session.

    >>> SessionTarget("main").target
    '=main'
    """

    session_name: str

    @property
    def target(self) -> str:
        return f"={self.session_name}"

    def validate(self) -> None:
        """Raise :exc:`~tmuxlib.exc.InvalidParameter` if malformed."""
        session_check_name(self.session_name)

    def __str__(self) -> str:
        return self.target


@dataclasses.dataclass(frozen=True)
class WindowTarget:
    """Identifier of a window: its index within a named session.

    >>> WindowTarget("main", 1).target
    '=main:1'
    """

    session_name: str
    window_index: int

    @property
    def session(self) -> SessionTarget:
        return SessionTarget(self.session_name)

    @property
    def target(self) -> str:
        return f"={self.session_name}:{self.window_index}"

    def validate(self) -> None:
        """Raise :exc:`~tmuxlib.exc.InvalidParameter` if malformed."""
        session_check_name(self.session_name)
        check_index(self.window_index, "window_index")

    def __str__(self) -> str:
        return self.target


@dataclasses.dataclass(frozen=True)
class PaneTarget:
    """Identifier of a pane: its index within a window.

    >>> PaneTarget("main", 1, 0).target
    '=main:1.0'
    """

    session_name: str
    window_index: int
    pane_index: int

    @property
    def window(self) -> WindowTarget:
        return WindowTarget(self.session_name, self.window_index)

    @property
    def session(self) -> SessionTarget:
        return SessionTarget(self.session_name)

    @property
    def target(self) -> str:
        return f"={self.session_name}:{self.window_index}.{self.pane_index}"

    def validate(self) -> None:
        """Raise :exc:`~tmuxlib.exc.InvalidParameter` if malformed."""
        session_check_name(self.session_name)
        check_index(self.window_index, "window_index")
        check_index(self.pane_index, "pane_index")

    def __str__(self) -> str:
        return self.target


class HasSessionTarget(t.Protocol):
    """Anything exposing a :class:`SessionTarget`, e.g. a session snapshot."""

    @property
    def target(self) -> SessionTarget: ...


class HasWindowTarget(t.Protocol):
    """Anything exposing a :class:`WindowTarget`, e.g. a window snapshot."""

    @property
    def target(self) -> WindowTarget: ...


class HasPaneTarget(t.Protocol):
    """Anything exposing a :class:`PaneTarget`, e.g. a pane snapshot."""

    @property
    def target(self) -> PaneTarget: ...


SessionLike = t.Union[SessionTarget, HasSessionTarget, str]
WindowLike = t.Union[WindowTarget, HasWindowTarget]
PaneLike = t.Union[PaneTarget, HasPaneTarget]

_T = t.TypeVar("_T", SessionTarget, WindowTarget, PaneTarget)


def _resolve(obj: t.Any, target_cls: type[_T], what: str) -> _T:
    target = obj if isinstance(obj, target_cls) else getattr(obj, "target", None)
    if not isinstance(target, target_cls):
        msg = f"expected a {what} target or snapshot, got {obj!r}"
        raise exc.InvalidParameter(msg)
    target.validate()
    return target


def as_session_target(session: SessionLike) -> SessionTarget:
    """Resolve a session name, target or snapshot into a validated target."""
    if isinstance(session, str):
        session = SessionTarget(session)
    return _resolve(session, SessionTarget, "session")


def as_window_target(window: WindowLike) -> WindowTarget:
    """Resolve a window target or snapshot into a validated target."""
    return _resolve(window, WindowTarget, "window")


def as_pane_target(pane: PaneLike) -> PaneTarget:
    """Resolve a pane target or snapshot into a validated target."""
    return _resolve(pane, PaneTarget, "pane")


def as_window_or_pane_target(obj: WindowLike | PaneLike) -> WindowTarget | PaneTarget:
    """Resolve a window or pane, keeping whichever level was given."""
    target = obj
    if not isinstance(obj, (WindowTarget, PaneTarget)):
        target = getattr(obj, "target", None)
    if isinstance(target, PaneTarget):
        return as_pane_target(target)
    return as_window_target(t.cast("WindowLike", obj))
