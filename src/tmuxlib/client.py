"""Snapshot of the current tmux client.

tmuxlib.client
~~~~~~~~~~~~~~

"""

from __future__ import annotations

import dataclasses
import typing as t


@dataclasses.dataclass(frozen=True)
class Client:
    """Sessions a tmux client is on and was last on.

    ``last_session_name`` is empty when the client has not switched yet.
    """

    session_name: str
    last_session_name: str = ""

    @classmethod
    def from_record(cls, record: dict[str, t.Any]) -> Client:
        """Build from a record decoded with :data:`~tmuxlib.formats.CLIENT_FIELDS`."""
        return cls(
            session_name=record["client_session"],
            last_session_name=record["client_last_session"],
        )
