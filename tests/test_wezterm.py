import stat

import pytest

from grove.launch.base import LaunchOptions, SpawnFailedError, TerminalKind
from grove.launch.wezterm import Wezterm


def make_tab(cwd, command=None):
    return LaunchOptions(cwd=cwd, command=command)


def wz():
    return Wezterm("wezterm.exe")


def test_three_tabs_produce_three_separate_spawn_invocations():
    tabs = [make_tab("/c/work/foo"), make_tab("/c/work/bar"), make_tab("/c/work/baz")]
    argvs = wz().dry_run_tabs(tabs)
    assert len(argvs) == 3
    for argv in argvs:
        assert argv[:3] == ["wezterm.exe", "cli", "spawn"]


def test_cwd_converted_to_windows_path():
    argv = wz().dry_run_tabs([make_tab("/c/work/grove")])[0]
    idx = argv.index("--cwd")
    assert argv[idx + 1] == "C:\\work\\grove"


def test_configured_wezterm_path_used():
    argvs = Wezterm("/custom/path/wezterm").dry_run_tabs([make_tab("/c/work/foo")])
    assert argvs[0][0] == "/custom/path/wezterm"


def test_dry_run_returns_one_argv_per_tab_no_process_spawned():
    tabs = [make_tab("/c/work/a", "fish -l"), make_tab("/c/work/b", "fish -l")]
    argvs = wz().dry_run_tabs(tabs)
    assert len(argvs) == 2
    for argv in argvs:
        assert "--cwd" in argv
        assert argv[-2:] == ["--", "fish -l"]


def test_no_command_means_no_separator():
    argv = wz().build_argv([make_tab("/c/work/foo")])[0]
    assert "--" not in argv
    assert argv == ["wezterm.exe", "cli", "spawn", "--cwd", "C:\\work\\foo"]


def test_default_exe_is_wezterm():
    assert Wezterm().dry_run_tabs([make_tab("/c/work/foo")])[0][0] == "wezterm"


def test_dry_run_joins_argv():
    out = wz().dry_run(make_tab("/c/work/foo", "fish -l"))
    assert out == "wezterm.exe cli spawn --cwd C:\\work\\foo -- fish -l"


def test_kind_is_wezterm():
    assert wz().kind() is TerminalKind.WEZTERM


def test_from_path_missing_raises(tmp_path, monkeypatch):
    monkeypatch.setenv("PATH", str(tmp_path))
    with pytest.raises(SpawnFailedError) as info:
        Wezterm.from_path()
    assert "wezterm not found on PATH" in str(info.value)


def test_from_path_finds_executable(tmp_path, monkeypatch):
    exe = tmp_path / "wezterm"
    exe.write_text("#!/bin/sh\n")
    exe.chmod(exe.stat().st_mode | stat.S_IXUSR)
    monkeypatch.setenv("PATH", str(tmp_path))
    term = Wezterm.from_path()
    assert term.dry_run_tabs([make_tab("/c/work/foo")])[0][0] == str(exe)


def test_launch_with_missing_exe_raises_spawn_failed(tmp_path):
    term = Wezterm(tmp_path / "does-not-exist")
    with pytest.raises(SpawnFailedError):
        term.launch(make_tab("/c/work/foo"))