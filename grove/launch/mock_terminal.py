"""A terminal that records launches instead of starting processes."""

from __future__ import annotations

import os
import threading

from grove.launch.base import LaunchOptions, Terminal, TerminalKind

__all__ = ["MockTerminal"]


class MockTerminal(Terminal):
    """Records every ``LaunchOptions`` passed to ``launch``."""

    def __init__(self, kind: TerminalKind) -> None:
        self._kind = kind
        self._tabs: list[LaunchOptions] = []
        self._lock = threading.Lock()

    @classmethod
    def wezterm(cls) -> MockTerminal:
        return cls(TerminalKind.WEZTERM)

    @classmethod
    def windows_terminal(cls) -> MockTerminal:
        return cls(TerminalKind.WINDOWS_TERMINAL)

    def recorded_tabs(self) -> list[LaunchOptions]:
        """A copy of the tabs launched so far, in order."""
        with self._lock:
            return list(self._tabs)

    def launch(self, opts: LaunchOptions) -> None:
        with self._lock:
            self._tabs.append(opts)

    def dry_run(self, opts: LaunchOptions) -> str:
        return (
            f"[mock] cwd={os.fspath(opts.cwd)} "
            f"title={opts.title or ''} cmd={opts.command or ''}"
        )

    def kind(self) -> TerminalKind:
        return self._kind