"""Internal APIs for tmuxlib. Not covered by versioning policy."""
