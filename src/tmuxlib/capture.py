r"""Post-processing for ``capture-pane`` output.

tmuxlib.capture
~~~~~~~~~~~~~~~

tmux pads captured lines with spaces up to the pane width and does not emit
the trailing SGR reset, so a captured buffer replayed into a terminal bleeds
its last colour. :func:`cleanup_captured_buffer` normalises both.
"""

from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:
    from collections.abc import Sequence

#: SGR reset appended to the last captured line
RESET = "\x1b[0m"


def trim_trailing(line: str) -> str:
    """Strip trailing spaces and tabs only.

    >>> trim_trailing("  text \t ")
    '  text'
    """
    return line.rstrip(" \t")


def drop_last_empty_lines(lines: Sequence[str]) -> list[str]:
    """Drop the run of empty lines at the end.

    All-empty input is returned unchanged.

    >>> drop_last_empty_lines(["a", "", "b", "", ""])
    ['a', '', 'b']
    >>> drop_last_empty_lines(["", ""])
    ['', '']
    """
    for last in range(len(lines) - 1, -1, -1):
        if lines[last]:
            return list(lines[: last + 1])
    return list(lines)


def cleanup_captured_buffer(buffer: str, drop_last_lines: int = 0) -> str:
    r"""Clean a buffer captured with ``capture-pane -p -e``.

    - each line is right-trimmed of spaces and tabs,
    - trailing empty lines are dropped,
    - the last *drop_last_lines* lines are removed (e.g. a shell prompt that
      would otherwise be replayed),
    - :data:`RESET` is appended to the last line, and every line ends with
      ``\n``.

    >>> cleanup_captured_buffer("line1   \nline2\n\n\n   \n")
    'line1\nline2\x1b[0m\n'
    >>> cleanup_captured_buffer("line1\nline2\nline3\nline4\n", drop_last_lines=2)
    'line1\nline2\x1b[0m\n'
    """
    lines = drop_last_empty_lines([trim_trailing(line) for line in buffer.split("\n")])
    if drop_last_lines > 0:
        lines = lines[: max(len(lines) - drop_last_lines, 0)]
    if not lines:
        return ""
    lines[-1] += RESET
    return "".join(f"{line}\n" for line in lines)
