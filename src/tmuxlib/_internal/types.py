"""Internal type annotations.

Notes
-----
:class:`StrPath` follows typeshed's ``_typeshed.StrPath``.
"""

from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:
    from os import PathLike
    from typing import TypeAlias

StrPath: TypeAlias = "str | PathLike[str]"
