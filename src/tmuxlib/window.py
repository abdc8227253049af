"""Snapshot of a :term:`tmux(1)` window.

tmuxlib.window
~~~~~~~~~~~~~~

"""

from __future__ import annotations

import dataclasses
import typing as t

from tmuxlib.targets import SessionTarget, WindowTarget


@dataclasses.dataclass(frozen=True, repr=False)
class Window:
    """Point-in-time, read-only view of a :term:`tmux(1)` window [window_manual]_.

    ``window_index`` identifies the window within ``session_name`` only; the
    tmux-wide ``window_id`` (``@N``) is kept for reference.

    References
    ----------
    .. [window_manual] tmux window. openbsd manpage for TMUX(1).
           "Each session has one or more windows linked to it. [...] Windows
           may be linked to multiple sessions and are made up of one or more
           panes."

       https://man.openbsd.org/tmux.1#DESCRIPTION.
    """

    session_name: str
    window_index: int
    window_id: str
    window_name: str
    active: bool
    layout: str
    panes: int

    @classmethod
    def from_record(cls, record: dict[str, t.Any]) -> Window:
        """Build from a record decoded with :data:`~tmuxlib.formats.WINDOW_FIELDS`."""
        return cls(
            session_name=record["session_name"],
            window_index=record["window_index"],
            window_id=record["window_id"],
            window_name=record["window_name"],
            active=record["window_active"],
            layout=record["window_layout"],
            panes=record["window_panes"],
        )

    @property
    def target(self) -> WindowTarget:
        return WindowTarget(self.session_name, self.window_index)

    @property
    def session(self) -> SessionTarget:
        """Non-owning reference to the containing session."""
        return SessionTarget(self.session_name)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.window_id} "
            f"{self.window_index}:{self.window_name}, {self.session_name})"
        )
