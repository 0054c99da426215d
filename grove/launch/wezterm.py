"""Wezterm launcher: one ``wezterm cli spawn`` process per tab."""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Iterable

from grove.launch.base import LaunchOptions, SpawnFailedError, Terminal, TerminalKind
from grove.paths import to_windows_path

__all__ = ["Wezterm"]


class Wezterm(Terminal):
    """Opens tabs with ``wezterm cli spawn``, one invocation per tab."""

    def __init__(self, wezterm_exe: str | os.PathLike[str] = "wezterm") -> None:
        self.wezterm_exe = os.fspath(wezterm_exe)

    @classmethod
    def from_path(cls) -> Wezterm:
        """Locate ``wezterm`` (or ``wezterm.exe``) on PATH."""
        exe = shutil.which("wezterm") or shutil.which("wezterm.exe")
        if exe is None:
            raise SpawnFailedError("wezterm not found on PATH")
        return cls(exe)

    def build_argv(self, tabs: Iterable[LaunchOptions]) -> list[list[str]]:
        """One argv per tab."""
        argvs = []
        for tab in tabs:
            argv = [self.wezterm_exe, "cli", "spawn", "--cwd", to_windows_path(tab.cwd)]
            if tab.command is not None:
                argv += ["--", tab.command]
            argvs.append(argv)
        return argvs

    def launch_tabs(self, tabs: Iterable[LaunchOptions]) -> None:
        """Spawn one wezterm process per tab."""
        for argv in self.build_argv(tabs):
            try:
                subprocess.Popen(argv)
            except OSError as exc:
                raise SpawnFailedError(str(exc)) from exc

    def dry_run_tabs(self, tabs: Iterable[LaunchOptions]) -> list[list[str]]:
        """The per-tab argvs, without spawning anything."""
        return self.build_argv(tabs)

    def launch(self, opts: LaunchOptions) -> None:
        self.launch_tabs([opts])

    def dry_run(self, opts: LaunchOptions) -> str:
        return "\n".join(" ".join(argv) for argv in self.dry_run_tabs([opts]))

    def kind(self) -> TerminalKind:
        return TerminalKind.WEZTERM