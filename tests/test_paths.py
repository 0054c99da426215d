from pathlib import PurePosixPath

import pytest

from grove.paths import to_windows_path, to_wsl_path


def test_short_wsl_path_becomes_windows():
    assert to_windows_path("/c/work/foo") == "C:\\work\\foo"


def test_mnt_wsl_path_becomes_windows():
    assert to_windows_path("/mnt/c/work/foo") == "C:\\work\\foo"


def test_already_windows_path_unchanged():
    assert to_windows_path("C:\\work\\foo") == "C:\\work\\foo"


def test_non_mounted_path_unchanged():
    assert to_windows_path("/home/oystein") == "/home/oystein"


def test_unc_wsl_path_unchanged():
    assert to_windows_path("//wsl$/Ubuntu/home") == "//wsl$/Ubuntu/home"


@pytest.mark.parametrize("path", ["/c", "/c/"])
def test_wsl_drive_root_becomes_windows_root(path):
    assert to_windows_path(path) == "C:\\"


def test_mnt_drive_root_becomes_windows_root():
    assert to_windows_path("/mnt/c") == "C:\\"


def test_accepts_path_objects():
    assert to_windows_path(PurePosixPath("/d/data/x")) == "D:\\data\\x"


def test_windows_path_becomes_wsl():
    assert to_wsl_path("C:\\work\\foo") == PurePosixPath("/c/work/foo")


def test_already_wsl_path_unchanged():
    assert to_wsl_path("/c/work/foo") == PurePosixPath("/c/work/foo")


def test_windows_root_becomes_wsl_root():
    assert to_wsl_path("C:\\") == PurePosixPath("/c")


def test_windows_forward_slash_becomes_wsl():
    assert to_wsl_path("C:/work/foo") == PurePosixPath("/c/work/foo")


def test_lowercase_drive_letter_normalized():
    assert to_wsl_path("c:\\work\\foo") == PurePosixPath("/c/work/foo")


def test_round_trip_wsl_to_windows_to_wsl():
    original = "/c/work/grove/src/paths.rs"
    win = to_windows_path(original)
    assert to_wsl_path(win) == PurePosixPath(original)


def test_round_trip_mnt_to_windows_to_wsl():
    win = to_windows_path("/mnt/c/work/grove")
    assert to_wsl_path(win) == PurePosixPath("/c/work/grove")