"""Tests for tmuxlib."""
