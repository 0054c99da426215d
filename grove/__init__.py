"""Git-worktree project registry, WSL/Windows path helpers, terminal launchers and legacy config migration."""

__version__ = "0.1.0"