import pytest

from grove.launch.base import LaunchOptions, SpawnFailedError, TerminalKind
from grove.launch.windows_terminal import WindowsTerminal


def make_tab(cwd, title=None, command=None):
    return LaunchOptions(cwd=cwd, title=title, command=command)


def wt():
    return WindowsTerminal("wt.exe")


def test_single_wt_invocation_for_three_tabs():
    tabs = [
        make_tab("/c/work/foo", "foo"),
        make_tab("/c/work/bar", "bar"),
        make_tab("/c/work/baz", "baz"),
    ]
    argv = wt().dry_run_tabs(tabs)
    assert argv[0] == "wt.exe"
    assert argv.count(";") == 2


def test_cwd_converted_to_windows_path():
    argv = wt().dry_run_tabs([make_tab("/c/work/foo")])
    idx = argv.index("--startingDirectory")
    assert argv[idx + 1] == "C:\\work\\foo"


def test_title_forwarded_to_wt():
    argv = wt().dry_run_tabs([make_tab("/c/work/proj", "my-project")])
    idx = argv.index("--title")
    assert argv[idx + 1] == "my-project"


def test_dry_run_does_not_spawn_process():
    tabs = [
        make_tab("/c/work/a", "a", "fish -l"),
        make_tab("/c/work/b", "b", "fish -l"),
    ]
    argv = wt().dry_run_tabs(tabs)
    assert argv
    assert argv[0] == "wt.exe"
    assert argv.count("--startingDirectory") == 2


def test_full_argv_layout():
    tabs = [
        make_tab("/c/work/a", "a", "fish -l"),
        make_tab("/mnt/d/b"),
    ]
    assert wt().build_argv(tabs) == [
        "wt.exe",
        "new-tab", "--startingDirectory", "C:\\work\\a", "--title", "a", "fish -l",
        ";",
        "new-tab", "--startingDirectory", "D:\\b",
    ]


def test_default_exe_is_wt():
    assert WindowsTerminal().build_argv([])[0] == "wt.exe"


def test_dry_run_joins_argv():
    out = wt().dry_run(make_tab("/c/work/proj", "my-project"))
    assert out == "wt.exe new-tab --startingDirectory C:\\work\\proj --title my-project"


def test_kind_is_windows_terminal():
    assert wt().kind() is TerminalKind.WINDOWS_TERMINAL


def test_launch_with_missing_exe_raises_spawn_failed(tmp_path):
    term = WindowsTerminal(str(tmp_path / "missing-wt.exe"))
    with pytest.raises(SpawnFailedError):
        term.launch(make_tab("/c/work/foo"))