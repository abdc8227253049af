"""Format variables and the decoder for tmux's ``-F`` output.

tmuxlib.formats
~~~~~~~~~~~~~~~

Queries ask tmux to print one line per object, with the requested format
variables joined by :data:`FORMAT_SEPARATOR`. The layouts below are the wire
contract with tmux; each is an ordered tuple of typed :class:`Field` entries
checked at decode time.

For reference: https://github.com/tmux/tmux/blob/master/format.c
"""

from __future__ import annotations

import datetime
import enum
import logging
import re
import typing as t

from . import exc

if t.TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

#: Separator for format strings.
#:
#: tmux escapes control characters in printed output (``\x1f`` comes back as
#: ``\037``), so a printable Unicode symbol is used instead. ``␞`` (U+241E,
#: SYMBOL FOR RECORD SEPARATOR) does not occur in paths, commands or layouts.
#:
#: tmuxlib rejects it in names it sets, but tmux itself does not. A window name
#: or path containing it, set from outside tmuxlib, makes every listing that
#: includes that object fail with :exc:`~tmuxlib.exc.MalformedRecord`.
FORMAT_SEPARATOR = "␞"

_TRUE_VALUES = frozenset(("1", "on", "true", "yes"))
_FALSE_VALUES = frozenset(("0", "off", "false", "no"))
_INTEGER_RE = re.compile(r"-?[0-9]+")
_ID_DIGITS_RE = re.compile(r"[0-9]+")


class FieldType(enum.Enum):
    """Semantic type of a format variable."""

    String = "STRING"
    """Passed through, surrounding whitespace trimmed."""
    Integer = "INTEGER"
    Boolean = "BOOLEAN"
    """``1``/``0``, ``on``/``off``, ``true``/``false``."""
    Flag = "FLAG"
    """A count where anything above zero means true, e.g. ``session_attached``."""
    Timestamp = "TIMESTAMP"
    """Seconds since the epoch, decoded to an aware UTC datetime."""
    SessionId = "SESSION_ID"
    """``$`` followed by digits."""
    WindowId = "WINDOW_ID"
    """``@`` followed by digits."""
    PaneId = "PANE_ID"
    """``%`` followed by digits."""


_ID_PREFIXES: dict[FieldType, str] = {
    FieldType.SessionId: "$",
    FieldType.WindowId: "@",
    FieldType.PaneId: "%",
}


class Field(t.NamedTuple):
    """A named, typed tmux format variable."""

    name: str
    type: FieldType = FieldType.String

    @property
    def tmux_format(self) -> str:
        """Return the tmux format expression, e.g. ``#{session_name}``."""
        return f"#{{{self.name}}}"


SESSION_FIELDS: tuple[Field, ...] = (
    Field("session_name"),
    Field("session_id", FieldType.SessionId),
    Field("session_attached", FieldType.Flag),
    Field("session_windows", FieldType.Integer),
    Field("session_created", FieldType.Timestamp),
    Field("session_path"),
)

WINDOW_FIELDS: tuple[Field, ...] = (
    Field("session_name"),
    Field("window_index", FieldType.Integer),
    Field("window_id", FieldType.WindowId),
    Field("window_name"),
    Field("window_active", FieldType.Boolean),
    Field("window_layout"),
    Field("window_panes", FieldType.Integer),
)

PANE_FIELDS: tuple[Field, ...] = (
    Field("session_name"),
    Field("window_index", FieldType.Integer),
    Field("pane_index", FieldType.Integer),
    Field("pane_id", FieldType.PaneId),
    Field("pane_height", FieldType.Integer),
    Field("pane_width", FieldType.Integer),
    Field("pane_current_path"),
    Field("pane_current_command"),
    Field("pane_active", FieldType.Boolean),
)

CLIENT_FIELDS: tuple[Field, ...] = (
    Field("client_session"),
    Field("client_last_session"),
)


def build_format(
    fields: Sequence[Field],
    separator: str = FORMAT_SEPARATOR,
) -> str:
    """Return the ``-F`` argument asking tmux for *fields*.

    >>> build_format((Field("session_name"), Field("session_windows")), "|")
    '#{session_name}|#{session_windows}'
    """
    return separator.join(field.tmux_format for field in fields)


def _to_int(value: str) -> int:
    """Parse ASCII digits only, unlike :func:`int` which takes ``3_000``."""
    value = value.strip()
    if _INTEGER_RE.fullmatch(value) is None:
        msg = f"not an integer: {value!r}"
        raise ValueError(msg)
    return int(value)


def _coerce(value: str, field: Field) -> t.Any:
    """Coerce one raw value. Raises :exc:`ValueError` on bad input."""
    if field.type is FieldType.String:
        return value.strip()
    if field.type is FieldType.Integer:
        return _to_int(value)
    if field.type is FieldType.Boolean:
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        msg = f"not a boolean: {value!r}"
        raise ValueError(msg)
    if field.type is FieldType.Flag:
        return value.strip() != "" and _to_int(value) > 0
    if field.type is FieldType.Timestamp:
        try:
            return datetime.datetime.fromtimestamp(
                _to_int(value),
                tz=datetime.timezone.utc,
            )
        except (OverflowError, OSError) as e:
            msg = f"timestamp out of range: {value!r}"
            raise ValueError(msg) from e
    prefix = _ID_PREFIXES[field.type]
    digits = value[len(prefix) :]
    if not value.startswith(prefix) or _ID_DIGITS_RE.fullmatch(digits) is None:
        msg = f"not a {prefix}-prefixed id: {value!r}"
        raise ValueError(msg)
    return value


def decode(
    raw: str | Sequence[str],
    fields: Sequence[Field],
    separator: str = FORMAT_SEPARATOR,
) -> list[dict[str, t.Any]]:
    r"""Decode tmux output into one dict per line, keyed by field name.

    Parameters
    ----------
    raw : str or list of str
        Captured stdout, either as one blob or already split into lines.
    fields : sequence of :class:`Field`
        Expected layout, in the order they were requested.
    separator : str, optional
        Delimiter between fields, default :data:`FORMAT_SEPARATOR`.

    Returns
    -------
    list of dict
        Empty when *raw* is empty; that means "no objects", not an error.

    Raises
    ------
    :exc:`exc.MalformedRecord`
        A line has the wrong number of fields or a value fails to coerce. The
        whole decode fails, partial results are never returned.

    Examples
    --------
    >>> layout = (
    ...     Field("name"),
    ...     Field("attached", FieldType.Boolean),
    ...     Field("windows", FieldType.Integer),
    ... )
    >>> decode("main\x011\x013\n", layout, separator="\x01")
    [{'name': 'main', 'attached': True, 'windows': 3}]

    >>> decode("", layout)
    []
    """
    lines = raw.split("\n") if isinstance(raw, str) else list(raw)
    while lines and lines[-1] == "":
        lines.pop()

    records: list[dict[str, t.Any]] = []
    for line_index, line in enumerate(lines):
        parts = line.split(separator)
        if len(parts) != len(fields):
            raise exc.MalformedRecord(
                line_index=line_index,
                line=line,
                reason=f"expected {len(fields)} fields, got {len(parts)}",
            )
        record: dict[str, t.Any] = {}
        for field, value in zip(fields, parts, strict=True):
            try:
                record[field.name] = _coerce(value, field)
            except ValueError as e:
                raise exc.MalformedRecord(
                    line_index=line_index,
                    line=line,
                    reason=f"{field.name}: {e}",
                ) from e
        records.append(record)

    logger.debug("decoded %d records for %s", len(records), [f.name for f in fields])
    return records


def encode_value(value: t.Any) -> str:
    """Render a decoded value back into tmux's textual form.

    >>> encode_value(True), encode_value(3), encode_value("main")
    ('1', '3', 'main')
    """
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, datetime.datetime):
        return str(int(value.timestamp()))
    return str(value)


def encode_line(
    record: dict[str, t.Any],
    fields: Sequence[Field],
    separator: str = FORMAT_SEPARATOR,
) -> str:
    r"""Join a decoded record back into one output line.

    >>> layout = (Field("name"), Field("windows", FieldType.Integer))
    >>> encode_line({"name": "main", "windows": 3}, layout, separator="\x01")
    'main\x013'
    """
    return separator.join(encode_value(record[field.name]) for field in fields)
