"""Snapshot of a :term:`tmux(1)` session.

tmuxlib.session
~~~~~~~~~~~~~~~

"""

from __future__ import annotations

import dataclasses
import typing as t

from tmuxlib.targets import SessionTarget

if t.TYPE_CHECKING:
    import datetime


@dataclasses.dataclass(frozen=True, repr=False)
class Session:
    """Point-in-time, read-only view of a :term:`tmux(1)` session [session_manual]_.

    Returned by :meth:`Server.list_sessions() <tmuxlib.server.Server.list_sessions>`.
    Holding a ``Session`` does not keep anything alive on the tmux server; query
    again to observe changes.

    References
    ----------
    .. [session_manual] tmux session. openbsd manpage for TMUX(1).
           "A session is a single collection of pseudo terminals under the
           management of tmux.  Each session has one or more windows linked to
           it."

       https://man.openbsd.org/tmux.1#DESCRIPTION.
    """

    session_name: str
    session_id: str
    attached: bool
    windows: int
    created: datetime.datetime
    path: str = ""

    @classmethod
    def from_record(cls, record: dict[str, t.Any]) -> Session:
        """Build from a record decoded with :data:`~tmuxlib.formats.SESSION_FIELDS`."""
        return cls(
            session_name=record["session_name"],
            session_id=record["session_id"],
            attached=record["session_attached"],
            windows=record["session_windows"],
            created=record["session_created"],
            path=record.get("session_path", ""),
        )

    @property
    def target(self) -> SessionTarget:
        return SessionTarget(self.session_name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.session_id} {self.session_name})"
