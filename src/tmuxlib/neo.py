"""Tools for hydrating tmux data into python dataclass objects."""

from __future__ import annotations

import logging
import typing as t
from collections.abc import Iterable

from tmuxlib.formats import build_format, decode

if t.TYPE_CHECKING:
    from collections.abc import Sequence

    from tmuxlib.common import CmdProtocol, CommandResult
    from tmuxlib.formats import Field

    ListCmd = t.Literal["list-sessions", "list-windows", "list-panes", "display-message"]
    ListExtraArgs = Iterable[str] | None

logger = logging.getLogger(__name__)


OutputRaw = dict[str, t.Any]
OutputsRaw = list[OutputRaw]


def fetch_raw(
    cmd: CmdProtocol,
    list_cmd: ListCmd,
    fields: Sequence[Field],
    list_extra_args: ListExtraArgs = None,
    target: str | None = None,
) -> CommandResult:
    """Run one listing command asking for *fields*. Does not interpret failures."""
    extra: list[str] = []
    if list_extra_args is not None and isinstance(list_extra_args, Iterable):
        extra.extend(list_extra_args)
    return cmd(list_cmd, *extra, target=target, format=build_format(fields))


def fetch_objs(
    cmd: CmdProtocol,
    list_cmd: ListCmd,
    fields: Sequence[Field],
    list_extra_args: ListExtraArgs = None,
    target: str | None = None,
) -> OutputsRaw:
    """Fetch and decode a listing of raw data from a tmux command.

    Exactly one tmux invocation. A failed invocation raises its classified
    exception before any output is decoded.
    """
    proc = fetch_raw(
        cmd,
        list_cmd=list_cmd,
        fields=fields,
        list_extra_args=list_extra_args,
        target=target,
    )
    proc.raise_for_failure()
    return decode(proc.stdout, fields)

