"""tmuxlib, a typed, snapshot-based API for the tmux terminal multiplexer."""

from .__about__ import (
    __author__,
    __copyright__,
    __description__,
    __email__,
    __license__,
    __package_name__,
    __title__,
    __version__,
)
from .client import Client
from .common import CommandResult
from .constants import FailureKind, OptionScope, PaneDirection
from .pane import Pane
from .server import Server
from .session import Session
from .targets import PaneTarget, SessionTarget, WindowTarget
from .window import Window

__all__ = (
    "Client",
    "CommandResult",
    "FailureKind",
    "OptionScope",
    "Pane",
    "PaneDirection",
    "PaneTarget",
    "Server",
    "Session",
    "SessionTarget",
    "Window",
    "WindowTarget",
    "__author__",
    "__copyright__",
    "__description__",
    "__email__",
    "__license__",
    "__package_name__",
    "__title__",
    "__version__",
)
