"""Snapshot of a :term:`tmux(1)` pane.

tmuxlib.pane
~~~~~~~~~~~~

"""

from __future__ import annotations

import dataclasses
import typing as t

from tmuxlib.targets import PaneTarget, WindowTarget


@dataclasses.dataclass(frozen=True, repr=False)
class Pane:
    """Point-in-time, read-only view of a :term:`tmux(1)` pane [pane_manual]_.

    Attributes
    ----------
    height : int
        Rows.
    width : int
        Columns.
    current_path : str
        Working directory of the foreground process.
    current_command : str
        Name of the foreground process.

    References
    ----------
    .. [pane_manual] tmux pane. openbsd manpage for TMUX(1).
           "Each window displayed by tmux may be split into one or more
           panes; each pane takes up a certain area of the display and is
           a separate terminal."

       https://man.openbsd.org/tmux.1#WINDOWS_AND_PANES.
    """

    session_name: str
    window_index: int
    pane_index: int
    pane_id: str
    height: int
    width: int
    current_path: str
    current_command: str
    active: bool

    @classmethod
    def from_record(cls, record: dict[str, t.Any]) -> Pane:
        """Build from a record decoded with :data:`~tmuxlib.formats.PANE_FIELDS`."""
        return cls(
            session_name=record["session_name"],
            window_index=record["window_index"],
            pane_index=record["pane_index"],
            pane_id=record["pane_id"],
            height=record["pane_height"],
            width=record["pane_width"],
            current_path=record["pane_current_path"],
            current_command=record["pane_current_command"],
            active=record["pane_active"],
        )

    @property
    def target(self) -> PaneTarget:
        return PaneTarget(self.session_name, self.window_index, self.pane_index)

    @property
    def window(self) -> WindowTarget:
        """Non-owning reference to the containing window."""
        return WindowTarget(self.session_name, self.window_index)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.pane_id} "
            f"{self.session_name}:{self.window_index}.{self.pane_index})"
        )
