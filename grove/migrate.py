"""One-shot migration of the legacy single-repo config to the multi-repo layout."""

from __future__ import annotations

import json
import os
import re
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from grove.registry import Project, Registry, RegistryError

__all__ = ["MigrationError", "MigrationOutcome", "run_if_needed"]

_U32_MAX = 2**32 - 1
_NAIVE_TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}$")


class MigrationError(Exception):
    """Migration failed.

    ``kind`` is one of ``"io"``, ``"json"``, ``"write"``, ``"rename"``,
    ``"create_dir"`` or ``"missing_field"``; ``path`` is the file involved.
    """

    def __init__(self, kind: str, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.path = path


@dataclass(frozen=True)
class MigrationOutcome:
    """Result of ``run_if_needed``: ``repo_id`` is None when nothing was migrated."""

    repo_id: str | None = None
    project_count: int = 0

    @property
    def migrated(self) -> bool:
        return self.repo_id is not None


@dataclass
class _LegacyConfig:
    main_repo: str
    work_dir: str
    dir_prefix: str = ""
    upstream_remote: str = "if"
    fork_remote: str = "my"
    default_base: str = "master"
    launch: Any = None


@dataclass
class _LegacyProject:
    path: str
    branch: str
    base: str
    created: str | None = None
    issue: int | None = None
    frozen: bool = False


def _json_error(path: Path, reason: str) -> MigrationError:
    return MigrationError("json", f"failed to parse {path}: {reason}", path)


def _string_field(
    data: dict[str, Any], key: str, path: Path, default: str | None = None
) -> str:
    if key not in data:
        if default is None:
            raise _json_error(path, f"missing field `{key}`")
        return default
    value = data[key]
    if not isinstance(value, str):
        raise _json_error(path, f"invalid type for field `{key}`, expected a string")
    return value


def _read_json_file(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MigrationError("io", f"failed to read {path}: {exc}", path) from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise _json_error(path, str(exc)) from exc


def _parse_legacy_config(data: Any, path: Path) -> _LegacyConfig:
    if not isinstance(data, dict):
        raise _json_error(path, "expected an object")
    return _LegacyConfig(
        main_repo=_string_field(data, "main_repo", path),
        work_dir=_string_field(data, "work_dir", path),
        dir_prefix=_string_field(data, "dir_prefix", path, ""),
        upstream_remote=_string_field(data, "upstream_remote", path, "if"),
        fork_remote=_string_field(data, "fork_remote", path, "my"),
        default_base=_string_field(data, "default_base", path, "master"),
        launch=data.get("launch"),
    )


def _parse_legacy_project(data: Any, path: Path) -> _LegacyProject:
    if not isinstance(data, dict):
        raise _json_error(path, "project is not an object")
    created = data.get("created")
    if created is not None and not isinstance(created, str):
        raise _json_error(path, "invalid type for field `created`")
    issue = data.get("issue")
    if issue is not None and (
        not isinstance(issue, int) or isinstance(issue, bool) or not 0 <= issue <= _U32_MAX
    ):
        raise _json_error(path, "invalid value for field `issue`")
    frozen = data.get("frozen", False)
    if not isinstance(frozen, bool):
        raise _json_error(path, "invalid type for field `frozen`")
    return _LegacyProject(
        path=_string_field(data, "path", path),
        branch=_string_field(data, "branch", path),
        base=_string_field(data, "base", path),
        created=created,
        issue=issue,
        frozen=frozen,
    )


def _parse_legacy_registry(data: Any, path: Path) -> dict[str, _LegacyProject]:
    if not isinstance(data, dict):
        raise _json_error(path, "expected an object")
    projects = data.get("projects", {})
    if not isinstance(projects, dict):
        raise _json_error(path, "invalid type for field `projects`")
    return {tag: _parse_legacy_project(raw, path) for tag, raw in sorted(projects.items())}


def _parse_rfc3339(text: str) -> datetime | None:
    if "T" not in text and "t" not in text:
        return None
    candidate = text
    if candidate[-1:] in ("Z", "z"):
        candidate = candidate[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(candidate.replace("t", "T"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo is not None else None


def _parse_naive_timestamp(text: str, tag: str) -> datetime:
    """Read a naive ``YYYY-MM-DDTHH:MM:SS`` as local time and return it in UTC.

    Timestamps with an offset are accepted too; anything else gives the current time.
    """
    if _NAIVE_TIMESTAMP.match(text):
        try:
            naive = datetime.strptime(text, "%Y-%m-%dT%H:%M:%S")
        except ValueError:
            naive = None
        if naive is not None:
            offset = datetime.now(timezone.utc).astimezone().utcoffset()
            local = timezone(offset) if offset is not None else timezone.utc
            return naive.replace(tzinfo=local).astimezone(timezone.utc)
    parsed = _parse_rfc3339(text)
    if parsed is not None:
        return parsed.astimezone(timezone.utc)
    print(
        f"grove migrate: could not parse timestamp {text!r} for project {tag!r}; using now",
        file=sys.stderr,
    )
    return datetime.now(timezone.utc)


def _build_launch_override(launch: Any) -> dict[str, Any] | None:
    if not isinstance(launch, dict):
        return None
    terminal = launch.get("terminal")
    terminal = terminal if isinstance(terminal, str) else None
    wezterm_path = launch.get("wezterm_path")
    wezterm_path = wezterm_path if isinstance(wezterm_path, str) and wezterm_path else None
    shell_command = launch.get("shell_command")
    shell_command = shell_command if isinstance(shell_command, str) else None
    if terminal is None and wezterm_path is None and shell_command is None:
        return None
    return {
        "terminal": terminal,
        "wezterm_path": wezterm_path,
        "shell_command": shell_command,
    }


def _derive_repo_id(main_repo: str) -> str:
    """``/c/work/desktop/master`` gives ``desktop``: the directory above the main repo."""
    path = Path(main_repo)
    parent = path.parent
    if parent == path:
        return "desktop"
    return parent.name or "desktop"


def _create_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise MigrationError(
            "create_dir", f"failed to create directory {path}: {exc}", path
        ) from exc


def _rename(src: Path, dst: Path) -> None:
    try:
        os.replace(src, dst)
    except OSError as exc:
        raise MigrationError(
            "rename", f"failed to rename {src} to {dst}: {exc}", src
        ) from exc


def _atomic_write_json(path: Path, value: Any) -> None:
    _create_dir(path.parent)
    tmp_path = path.with_name(path.stem + ".json.migrating-tmp")
    data = json.dumps(value, indent=2, ensure_ascii=False)
    try:
        tmp_path.write_text(data, encoding="utf-8")
    except OSError as exc:
        raise MigrationError("write", f"failed to write {tmp_path}: {exc}", tmp_path) from exc
    _rename(tmp_path, path)


def _default_legacy_config() -> _LegacyConfig:
    work_dir = os.environ.get("GROVE_MIGRATE_DEFAULT_WORK_DIR", "/c/work/desktop")
    main_repo = os.environ.get("GROVE_MIGRATE_DEFAULT_MAIN_REPO", f"{work_dir}/master")
    return _LegacyConfig(main_repo=main_repo, work_dir=work_dir)


def run_if_needed(config_dir: str | os.PathLike[str]) -> MigrationOutcome:
    """Migrate legacy ``config.json``/``registry.json`` in ``config_dir`` if present.

    Nothing is done when ``repos.json`` already exists or neither legacy file exists.
    """
    config_dir = Path(config_dir)
    repos_json = config_dir / "repos.json"
    if repos_json.exists():
        return MigrationOutcome()

    legacy_config_path = config_dir / "config.json"
    legacy_registry_path = config_dir / "registry.json"
    if not legacy_config_path.exists() and not legacy_registry_path.exists():
        return MigrationOutcome()

    print("grove: migrating legacy config to multi-repo format...", file=sys.stderr)

    if legacy_config_path.exists():
        legacy_cfg = _parse_legacy_config(
            _read_json_file(legacy_config_path), legacy_config_path
        )
    else:
        print(
            "grove migrate: config.json not found; writing manifest with defaults "
            "(please review)",
            file=sys.stderr,
        )
        legacy_cfg = _default_legacy_config()

    repo_id = _derive_repo_id(legacy_cfg.main_repo)
    work_dir = Path(legacy_cfg.work_dir)

    registry = Registry()
    if legacy_registry_path.exists():
        legacy_projects = _parse_legacy_registry(
            _read_json_file(legacy_registry_path), legacy_registry_path
        )
        project_count = len(legacy_projects)
        for tag, legacy in legacy_projects.items():
            created = (
                _parse_naive_timestamp(legacy.created, tag)
                if legacy.created is not None
                else datetime.now(timezone.utc)
            )
            registry.projects.setdefault(
                tag,
                Project(
                    path=Path(legacy.path),
                    branch=legacy.branch,
                    base=legacy.base,
                    created=created,
                    issue=legacy.issue,
                    frozen=legacy.frozen,
                ),
            )
    else:
        project_count = 0
        print(
            "grove migrate: registry.json not found; starting with empty registry",
            file=sys.stderr,
        )

    manifest = {
        "schema_version": 1,
        "default_repo": repo_id,
        "repos": {
            repo_id: {
                "main_repo": str(Path(legacy_cfg.main_repo)),
                "work_dir": str(work_dir),
                "dir_prefix": legacy_cfg.dir_prefix,
                "upstream_remote": legacy_cfg.upstream_remote,
                "fork_remote": legacy_cfg.fork_remote,
                "default_base": legacy_cfg.default_base,
                "issue_prefix": "DESKTOP",
                "launch": _build_launch_override(legacy_cfg.launch),
            }
        },
    }

    grove_dir = work_dir / ".grove"
    _create_dir(grove_dir)
    registry_dest = grove_dir / "registry.json"
    try:
        registry.save(grove_dir)
    except RegistryError as exc:
        raise MigrationError(
            "write", f"failed to write {registry_dest}: {exc}", registry_dest
        ) from exc

    _atomic_write_json(repos_json, manifest)

    if legacy_config_path.exists():
        _rename(legacy_config_path, config_dir / "config.json.pre-rust-migration")
    if legacy_registry_path.exists():
        _rename(legacy_registry_path, config_dir / "registry.json.pre-rust-migration")

    for line in (
        f"  repo id:   {repo_id}",
        f"  registry:  {registry_dest}  ({project_count} projects)",
        f"  manifest:  {repos_json}",
        "  backups:   config.json.pre-rust-migration, registry.json.pre-rust-migration",
        "grove: migration complete.",
    ):
        print(line, file=sys.stderr)

    return MigrationOutcome(repo_id=repo_id, project_count=project_count)