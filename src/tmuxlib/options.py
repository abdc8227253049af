"""Helpers for reading tmux options.

tmuxlib.options
~~~~~~~~~~~~~~~

"""

from __future__ import annotations

import logging
import typing as t

from tmuxlib import exc
from tmuxlib.common import CmdMixin, check_name
from tmuxlib.constants import OPTION_SCOPE_FLAG_MAP, OptionScope

if t.TYPE_CHECKING:
    from collections.abc import Iterable

    from tmuxlib.common import CommandResult

logger = logging.getLogger(__name__)


def handle_option_error(error: str, proc: CommandResult) -> t.NoReturn:
    """Raise exception if error in option command found.

    There are 3 different types of option errors:

    - unknown option
    - invalid option
    - ambiguous option

    All errors raised will have the base error of :exc:`exc.OptionError`. So to
    catch any option error, use ``except exc.OptionError``.

    Raises
    ------
    :exc:`exc.OptionError`, :exc:`exc.UnknownOption`, :exc:`exc.InvalidOption`,
    :exc:`exc.AmbiguousOption`
    """
    kwargs = {"argv": proc.argv, "stderr": proc.stderr}
    if "unknown option" in error:
        raise exc.UnknownOption(error, **kwargs)
    if "invalid option" in error:
        raise exc.InvalidOption(error, **kwargs)
    if "ambiguous option" in error:
        raise exc.AmbiguousOption(error, **kwargs)
    raise exc.OptionError(error, **kwargs)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_options_to_dict(lines: Iterable[str]) -> dict[str, str]:
    """Parse ``show-options`` output into a flat dict.

    Options printed without a value, or with an empty quoted value, are left
    out.

    >>> parse_options_to_dict(["status-keys vi", "message-limit 50"])
    {'status-keys': 'vi', 'message-limit': '50'}

    >>> parse_options_to_dict(["user-keys", "default-command ''"])
    {}

    >>> parse_options_to_dict(['command-alias[0] "split-pane=split-window"'])
    {'command-alias[0]': 'split-pane=split-window'}
    """
    options: dict[str, str] = {}
    for line in lines:
        key, _, value = line.partition(" ")
        value = _unquote(value.strip())
        if key and value:
            options[key] = value
    return options


class OptionsMixin(CmdMixin):
    """Read options from the tmux server. One invocation per call."""

    def _show_options_args(
        self,
        global_: bool,
        scope: OptionScope | None,
    ) -> list[str]:
        flags: list[str] = []
        if global_:
            flags.append("-g")
        if scope is not None:
            scope_flag = OPTION_SCOPE_FLAG_MAP[scope]
            if scope_flag:  # Session scope has empty string, skip it
                flags.append(scope_flag)
        return flags

    def show_options(
        self,
        global_: bool = False,
        scope: OptionScope | None = None,
    ) -> dict[str, str]:
        """Return all options as ``{name: value}``.

        Parameters
        ----------
        global_ : bool, optional
            Pass ``-g`` flag for global options, default False.
        scope : OptionScope, optional
            Option scope (Server/Session/Window/Pane). Session when omitted.
        """
        proc = self.cmd("show-options", *self._show_options_args(global_, scope))
        if proc.stderr and "option" in proc.stderr[0]:
            handle_option_error(proc.stderr[0], proc)
        proc.raise_for_failure()
        return parse_options_to_dict(proc.stdout)

    def show_option(
        self,
        option: str,
        global_: bool = False,
        scope: OptionScope | None = None,
    ) -> str | None:
        """Return the value of *option*, or None if it is unset.

        Parameters
        ----------
        option : str
            Option name, e.g. ``default-shell``.
        global_ : bool, optional
            Pass ``-g`` flag for global options, default False.
        scope : OptionScope, optional
            Option scope (Server/Session/Window/Pane). Session when omitted.
        """
        check_name(option, "option")
        proc = self.cmd(
            "show-options",
            *self._show_options_args(global_, scope),
            "-q",
            "-v",
            option,
        )
        if proc.stderr and "option" in proc.stderr[0]:
            handle_option_error(proc.stderr[0], proc)
        proc.raise_for_failure()

        value = "\n".join(proc.stdout).rstrip()
        if not value:
            return None
        return value

    def default_command(self) -> str:
        """Return the command tmux starts new panes with.

        ``default-command`` when set, otherwise ``default-shell``. A bash shell
        is started as a login shell (``-l``).

        Raises
        ------
        :exc:`exc.TmuxConfigError`
            Neither option is set.
        """
        options = self.show_options(global_=True)

        default_shell = options.get("default-shell")
        if default_shell is None:
            msg = "no default-shell"
            raise exc.TmuxConfigError(msg)
        if default_shell.endswith("bash"):
            default_shell = f"-l {default_shell}"

        return options.get("default-command", default_shell)
