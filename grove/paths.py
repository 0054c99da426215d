"""Conversion between WSL-style and Windows-style path strings."""

from __future__ import annotations

import os
from pathlib import PurePosixPath

__all__ = ["to_windows_path", "to_wsl_path"]


def _is_ascii_alpha(c: str) -> bool:
    return c.isascii() and c.isalpha()


def _looks_like_windows_path(s: str) -> bool:
    """True when ``s`` starts with a drive letter followed by a colon."""
    return len(s) >= 2 and s[1] == ":" and _is_ascii_alpha(s[0])


def _strip_wsl_short_prefix(s: str) -> str | None:
    """Return the remainder after ``/x/`` (or ``""`` for ``/x``), else None."""
    if len(s) < 2 or s[0] != "/" or not _is_ascii_alpha(s[1]):
        return None
    if len(s) == 2:
        return ""
    if s[2] == "/":
        return s[3:]
    return None


def _strip_wsl_mnt_prefix(s: str) -> tuple[str, str] | None:
    """Return ``(drive, rest)`` for ``/mnt/x/...`` paths, else None."""
    if not s.startswith("/mnt/"):
        return None
    s = s[len("/mnt/"):]
    if not s or not _is_ascii_alpha(s[0]):
        return None
    if len(s) == 1:
        return s[0], ""
    if s[1] == "/":
        return s[0], s[2:]
    return None


def _split_windows_drive(s: str) -> tuple[str, str] | None:
    """Split ``C:\\work\\foo`` into ``("C", "\\work\\foo")``."""
    if _looks_like_windows_path(s):
        return s[0], s[2:]
    return None


def to_windows_path(p: str | os.PathLike[str]) -> str:
    """Convert a WSL path (``/c/...`` or ``/mnt/c/...``) to a Windows path string.

    Paths without a WSL drive prefix, Windows paths and UNC paths are returned
    unchanged.
    """
    s = os.fspath(p)

    if _looks_like_windows_path(s):
        return s

    if s.startswith("//") or s.startswith("\\\\"):
        return s

    rest = _strip_wsl_short_prefix(s)
    if rest is not None:
        return f"{s[1].upper()}:\\{rest.replace('/', chr(92))}"

    mnt = _strip_wsl_mnt_prefix(s)
    if mnt is not None:
        drive, rest = mnt
        return f"{drive.upper()}:\\{rest.replace('/', chr(92))}"

    return s


def to_wsl_path(s: str) -> PurePosixPath:
    """Convert a Windows path string to the short WSL form (``/c/...``).

    Strings that do not look like Windows paths are returned as paths unchanged.
    """
    if s.startswith("/") and not _looks_like_windows_path(s):
        return PurePosixPath(s)

    split = _split_windows_drive(s)
    if split is not None:
        drive, rest = split
        unix_rest = rest.replace("\\", "/").lstrip("/")
        drive_lower = drive.lower()
        if not unix_rest:
            return PurePosixPath(f"/{drive_lower}")
        return PurePosixPath(f"/{drive_lower}/{unix_rest}")

    return PurePosixPath(s)