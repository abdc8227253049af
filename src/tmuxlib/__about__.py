"""Metadata package for tmuxlib."""

from __future__ import annotations

__title__ = "tmuxlib"
__package_name__ = "tmuxlib"
__version__ = "0.1.0"
__description__ = "Typed, snapshot-based API to read and manipulate tmux"
__email__ = "tmuxlib@users.noreply.github.com"
__author__ = "tmuxlib contributors"
__github__ = "https://github.com/tmuxlib/tmuxlib"
__docs__ = "https://github.com/tmuxlib/tmuxlib#readme"
__tracker__ = "https://github.com/tmuxlib/tmuxlib/issues"
__pypi__ = "https://pypi.org/project/tmuxlib/"
__license__ = "MIT"
__copyright__ = "Copyright 2026- tmuxlib contributors"
