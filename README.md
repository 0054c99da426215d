# grove

A library of building blocks for managing many git worktrees across several
repositories. It covers four areas: a per-repo project registry, conversion
between WSL and Windows paths, launchers that open terminal tabs, and a
one-shot migration of an older single-repo configuration.

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `grove.paths`

- `to_windows_path(p)` turns a short WSL path (`/c/work/foo`) or a long one
  (`/mnt/c/work/foo`) into `C:\work\foo`. A drive root such as `/c` becomes
  `C:\`. Windows paths, UNC paths (`//wsl$/...`) and paths with no drive
  prefix are returned unchanged.
- `to_wsl_path(s)` turns `C:\work\foo` or `C:/work/foo` into
  `PurePosixPath("/c/work/foo")`. The drive letter is lower-cased and `C:\`
  becomes `/c`. Other strings come back as paths unchanged.

### `grove.registry`

- `Project` records one worktree. Its fields are `path`, `branch`, `base`,
  `created` (a `datetime`, stored as RFC 3339), `issue` (an optional int) and
  `frozen`.
- `Registry` maps tags to projects and has a `schema_version` field.
  - `Registry.load(grove_dir)` reads `<grove_dir>/registry.json`. If the file
    is missing, it returns an empty registry. A file with a newer
    `schema_version` raises `SchemaTooNewError`.
  - `save(grove_dir)` creates the directory if needed. If a previous
    `registry.json` exists, it copies it to `registry.json.bak`. It then writes
    `registry.json.tmp` and renames it into place.
  - `insert(tag, project)` raises `DuplicateTagError` when the tag is already
    present.
  - `remove(tag)` returns the removed project and raises `TagNotFoundError`
    when the tag is absent.
  - `rename(old_tag, new_tag)` raises `DuplicateTagError` when the new tag is
    taken and `TagNotFoundError` when the old one is absent.
  - `list()` yields `(tag, project)` pairs in tag order.
  - `to_dict()` and `from_dict()` convert to and from the JSON shape.
- All registry errors derive from `RegistryError`.

### `grove.launch`

`grove.launch.base` defines the shared pieces:

- `TerminalKind`, with the members `WEZTERM` and `WINDOWS_TERMINAL`.
- `LaunchOptions(cwd, command=None, title=None)`, describing one tab.
- The abstract `Terminal` class, with `launch`, `dry_run` and `kind`.
- `autodetect(override_kind=None)`, which picks a terminal. An explicit
  override wins. Otherwise it checks, in order, `WEZTERM_PANE`, `WT_SESSION`,
  `wezterm.exe` on `PATH` and `wt.exe` on `PATH`. If none of these is found it
  raises `NoTerminalAvailableError`.
- `SpawnFailedError`, raised when a process cannot be started. Both error
  classes derive from `LaunchError`.

The launchers:

- `grove.launch.wezterm.Wezterm(wezterm_exe="wezterm")` runs one
  `wezterm cli spawn --cwd <windows path> [-- <command>]` process per tab.
  `Wezterm.from_path()` looks up `wezterm` or `wezterm.exe` on `PATH`.
- `grove.launch.windows_terminal.WindowsTerminal(wt_exe="wt.exe")` opens every
  tab in a single `wt.exe` call. Tabs are separated by `;`, and each one has
  `new-tab --startingDirectory <windows path> [--title <title>] [command]`.
- `grove.launch.mock_terminal.MockTerminal(kind)` records tabs without
  starting anything. `recorded_tabs()` returns them in the order they were
  launched.

Each launcher provides `build_argv` and `dry_run_tabs`, which return the
argv(s) without spawning anything. `dry_run(opts)` returns the command line
as text.

### `grove.migrate`

`run_if_needed(config_dir)` converts a legacy `config.json` / `registry.json`
pair into a global `repos.json` plus a per-repo
`<work_dir>/.grove/registry.json`.

- It does nothing when `repos.json` already exists or when neither legacy
  file is present.
- The repo id is the name of the directory above `main_repo`. For example,
  `/c/work/desktop/master` gives `desktop`.
- Naive legacy timestamps are read as local time and stored in UTC.
- The originals are renamed to `*.pre-rust-migration`.
- If only `registry.json` exists, defaults are used for the rest. The
  defaults can be redirected with `GROVE_MIGRATE_DEFAULT_WORK_DIR` and
  `GROVE_MIGRATE_DEFAULT_MAIN_REPO`.

It returns a `MigrationOutcome`. Its `migrated` is false when nothing was
done. Otherwise `repo_id` and `project_count` describe the result. Failures
raise `MigrationError`, whose `kind` and `path` say what went wrong.

## Example

```python
from datetime import datetime, timezone
from pathlib import Path

from grove.registry import Project, Registry

grove_dir = Path("/c/work/myrepo/.grove")
registry = Registry.load(grove_dir)
registry.insert(
    "feature-x",
    Project(
        path=Path("/c/work/myrepo/feature-x"),
        branch="PROJ-123-feature-x",
        base="origin/main",
        created=datetime.now(timezone.utc),
        issue=123,
    ),
)
registry.save(grove_dir)
```

## What this package does not do

- It provides no command-line program.
- It runs no git commands. It does not create, move or remove worktrees or
  branches, and it does not fetch or report git status.
- It does not load or edit `repos.json`, apart from writing one during
  migration.
- It does not work out which repo the current directory belongs to.

Those parts are left to the caller.