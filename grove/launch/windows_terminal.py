"""Windows Terminal launcher: all tabs in a single ``wt.exe`` invocation."""

from __future__ import annotations

import subprocess
from collections.abc import Iterable

from grove.launch.base import LaunchOptions, SpawnFailedError, Terminal, TerminalKind
from grove.paths import to_windows_path

__all__ = ["WindowsTerminal"]


class WindowsTerminal(Terminal):
    """Opens tabs with ``wt.exe new-tab ...``, separated by ``;``."""

    def __init__(self, wt_exe: str = "wt.exe") -> None:
        self.wt_exe = wt_exe

    def build_argv(self, tabs: Iterable[LaunchOptions]) -> list[str]:
        """The argv for opening every tab in one wt.exe process."""
        argv = [self.wt_exe]
        for i, tab in enumerate(tabs):
            if i > 0:
                argv.append(";")
            argv += ["new-tab", "--startingDirectory", to_windows_path(tab.cwd)]
            if tab.title is not None:
                argv += ["--title", tab.title]
            if tab.command is not None:
                argv.append(tab.command)
        return argv

    def launch_tabs(self, tabs: Iterable[LaunchOptions]) -> None:
        """Open all tabs in a single wt.exe process."""
        argv = self.build_argv(tabs)
        try:
            subprocess.Popen(argv)
        except OSError as exc:
            raise SpawnFailedError(str(exc)) from exc

    def dry_run_tabs(self, tabs: Iterable[LaunchOptions]) -> list[str]:
        """The argv that would be run, without spawning anything."""
        return self.build_argv(tabs)

    def launch(self, opts: LaunchOptions) -> None:
        self.launch_tabs([opts])

    def dry_run(self, opts: LaunchOptions) -> str:
        return " ".join(self.dry_run_tabs([opts]))

    def kind(self) -> TerminalKind:
        return TerminalKind.WINDOWS_TERMINAL