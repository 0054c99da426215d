"""Terminal abstraction and autodetection of the preferred terminal."""

from __future__ import annotations

import abc
import enum
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "TerminalKind",
    "LaunchOptions",
    "LaunchError",
    "NoTerminalAvailableError",
    "SpawnFailedError",
    "Terminal",
    "autodetect",
]


class TerminalKind(enum.Enum):
    """Supported terminal emulators."""

    WEZTERM = "wezterm"
    WINDOWS_TERMINAL = "windows_terminal"


@dataclass(frozen=True)
class LaunchOptions:
    """What to open in a new terminal tab."""

    cwd: Path
    command: str | None = None
    title: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "cwd", Path(self.cwd))


class LaunchError(Exception):
    """Base error for terminal launching."""


class NoTerminalAvailableError(LaunchError):
    """No supported terminal could be found."""

    def __init__(self) -> None:
        super().__init__(
            "no terminal available; set launch.terminal in config or ensure "
            "wt.exe/wezterm.exe is on PATH"
        )


class SpawnFailedError(LaunchError):
    """Starting the terminal process failed."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"terminal launch failed: {reason}")
        self.reason = reason


class Terminal(abc.ABC):
    """A terminal that can open tabs."""

    @abc.abstractmethod
    def launch(self, opts: LaunchOptions) -> None:
        """Open a tab described by ``opts``."""

    @abc.abstractmethod
    def dry_run(self, opts: LaunchOptions) -> str:
        """Describe what ``launch`` would run, without running it."""

    @abc.abstractmethod
    def kind(self) -> TerminalKind:
        """The kind of terminal this is."""


def autodetect(override_kind: TerminalKind | None = None) -> TerminalKind:
    """Pick the terminal to use.

    An explicit override wins; then ``WEZTERM_PANE``, then ``WT_SESSION``,
    then ``wezterm.exe`` on PATH, then ``wt.exe`` on PATH.
    """
    if override_kind is not None:
        return override_kind
    if "WEZTERM_PANE" in os.environ:
        return TerminalKind.WEZTERM
    if "WT_SESSION" in os.environ:
        return TerminalKind.WINDOWS_TERMINAL
    if shutil.which("wezterm.exe") is not None:
        return TerminalKind.WEZTERM
    if shutil.which("wt.exe") is not None:
        return TerminalKind.WINDOWS_TERMINAL
    raise NoTerminalAvailableError()