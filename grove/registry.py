"""Per-repo project registry stored as ``.grove/registry.json``."""

from __future__ import annotations

import json
import re
import shutil
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

MAX_SCHEMA_VERSION = 1

_U32_MAX = 2**32 - 1

_RFC3339 = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})$"
)


class RegistryError(Exception):
    """Base error for registry operations."""


class DuplicateTagError(RegistryError):
    """A tag is already present in the registry."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"tag already exists: {tag}")
        self.tag = tag


class SchemaTooNewError(RegistryError):
    """The registry file was written by a newer schema."""

    def __init__(self, found: int, max_version: int) -> None:
        super().__init__(
            f"registry.json has schema_version {found} but this build only "
            f"understands up to {max_version}.\nUpgrade grove or downgrade the config."
        )
        self.found = found
        self.max = max_version


class TagNotFoundError(RegistryError):
    """A tag is not present in the registry."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"tag not found: {tag}")
        self.tag = tag


def _format_rfc3339(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    text = dt.isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def _parse_rfc3339(text: str) -> datetime:
    match = _RFC3339.match(text)
    if match is None:
        raise ValueError(f"invalid RFC3339 timestamp: {text!r}")
    date, clock, fraction, offset = match.groups()
    micro = int((fraction or "0")[:6].ljust(6, "0"))
    naive = datetime.fromisoformat(f"{date}T{clock}").replace(microsecond=micro)
    if offset in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = -1 if offset[0] == "-" else 1
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    return naive.replace(tzinfo=tz)


def _require(data: dict[str, Any], key: str, kind: type) -> Any:
    if key not in data:
        raise RegistryError(f"failed to parse registry.json: missing field `{key}`")
    value = data[key]
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise RegistryError(
            f"failed to parse registry.json: invalid type for field `{key}`"
        )
    return value


@dataclass
class Project:
    """A worktree tracked by the registry."""

    path: Path
    branch: str
    base: str
    created: datetime
    issue: int | None = None
    frozen: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "branch": self.branch,
            "base": self.base,
            "created": _format_rfc3339(self.created),
            "issue": self.issue,
            "frozen": self.frozen,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Project:
        if not isinstance(data, dict):
            raise RegistryError("failed to parse registry.json: project is not an object")
        path = _require(data, "path", str)
        branch = _require(data, "branch", str)
        base = _require(data, "base", str)
        created_raw = _require(data, "created", str)
        try:
            created = _parse_rfc3339(created_raw)
        except ValueError as exc:
            raise RegistryError(f"failed to parse registry.json: {exc}") from exc

        issue = data.get("issue")
        if issue is not None and (
            not isinstance(issue, int) or isinstance(issue, bool) or not 0 <= issue <= _U32_MAX
        ):
            raise RegistryError("failed to parse registry.json: invalid value for `issue`")

        frozen = data.get("frozen", False)
        if not isinstance(frozen, bool):
            raise RegistryError("failed to parse registry.json: invalid type for `frozen`")

        return cls(
            path=Path(path),
            branch=branch,
            base=base,
            created=created,
            issue=issue,
            frozen=frozen,
        )


@dataclass
class Registry:
    """Mapping of tag to project, persisted atomically with a rolling backup."""

    schema_version: int = MAX_SCHEMA_VERSION
    projects: dict[str, Project] = field(default_factory=dict)

    @classmethod
    def load(cls, grove_dir: str | Path) -> Registry:
        """Load ``registry.json`` from ``grove_dir``; an absent file gives an empty registry."""
        path = Path(grove_dir) / "registry.json"
        if not path.exists():
            return cls()
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise RegistryError(f"failed to read registry.json: {exc}") from exc
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RegistryError(f"failed to parse registry.json: {exc}") from exc
        registry = cls.from_dict(data)
        if registry.schema_version > MAX_SCHEMA_VERSION:
            raise SchemaTooNewError(registry.schema_version, MAX_SCHEMA_VERSION)
        return registry

    def save(self, grove_dir: str | Path) -> None:
        """Write ``registry.json`` via a temp file, backing up the previous copy."""
        grove_dir = Path(grove_dir)
        path = grove_dir / "registry.json"
        tmp_path = grove_dir / "registry.json.tmp"
        bak_path = grove_dir / "registry.json.bak"
        try:
            grove_dir.mkdir(parents=True, exist_ok=True)
            if path.exists():
                shutil.copyfile(path, bak_path)
            data = json.dumps(self.to_dict(), indent=2, ensure_ascii=False)
            tmp_path.write_text(data, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as exc:
            raise RegistryError(f"failed to read registry.json: {exc}") from exc

    def insert(self, tag: str, project: Project) -> None:
        if tag in self.projects:
            raise DuplicateTagError(tag)
        self.projects[tag] = project

    def remove(self, tag: str) -> Project:
        try:
            return self.projects.pop(tag)
        except KeyError:
            raise TagNotFoundError(tag) from None

    def rename(self, old_tag: str, new_tag: str) -> None:
        if new_tag in self.projects:
            raise DuplicateTagError(new_tag)
        project = self.remove(old_tag)
        self.projects[new_tag] = project

    def list(self) -> Iterator[tuple[str, Project]]:
        """Yield ``(tag, project)`` pairs in tag order."""
        for tag in sorted(self.projects):
            yield tag, self.projects[tag]

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "projects": {tag: project.to_dict() for tag, project in self.list()},
        }

    @classmethod
    def from_dict(cls, data: Any) -> Registry:
        if not isinstance(data, dict):
            raise RegistryError("failed to parse registry.json: expected an object")
        schema_version = _require(data, "schema_version", int)
        if schema_version < 0 or schema_version > _U32_MAX:
            raise RegistryError("failed to parse registry.json: invalid schema_version")
        raw_projects = _require(data, "projects", dict)
        projects = {tag: Project.from_dict(raw) for tag, raw in raw_projects.items()}
        return cls(schema_version=schema_version, projects=projects)