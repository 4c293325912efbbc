from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from excise.errors import TargetError

DEFAULT_RESOLVE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")
DEFAULT_SOURCE_EXTENSIONS = (".ts", ".tsx")


def normalize_path(path: str | os.PathLike[str]) -> Path:
    """Absolute, lexically normalized path. Symlinks are left unresolved."""
    return Path(os.path.abspath(os.fspath(path)))


@dataclass(frozen=True)
class RunContext:
    project_root: Path
    base_dir: Path
    resolve_extensions: tuple[str, ...] = DEFAULT_RESOLVE_EXTENSIONS
    source_extensions: tuple[str, ...] = DEFAULT_SOURCE_EXTENSIONS
    aliases: dict[str, Path] = field(default_factory=dict)
    exclude: tuple[str, ...] = ()


@dataclass(frozen=True)
class TargetSpec:
    kind: str  # "file" or "directory"
    path: str


@dataclass
class FilesToRemove:
    import_names: set[str] = field(default_factory=set)
    file_paths: set[Path] = field(default_factory=set)


@dataclass(frozen=True)
class ImportEdge:
    importer_path: Path
    specifier: str
    resolved_path: Path | None
    imported_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class RemovedFrom:
    importer_path: str
    imported_names: list[str]


@dataclass(frozen=True)
class RemovalRecord:
    removed_target_path: str
    removed_from: list[RemovedFrom]


@dataclass(frozen=True)
class AuditResult:
    root: str
    generated_at: str
    dry_run: bool
    targets: list[TargetSpec]
    records: list[RemovalRecord]
    missing_targets: list[str] = field(default_factory=list)
    failed_saves: list[dict[str, str]] = field(default_factory=list)
    failed_deletes: list[dict[str, str]] = field(default_factory=list)
    summary: dict[str, Any] = field(default_factory=dict)


def normalize_targets(
    paths: list[str | os.PathLike[str]],
    project_root: Path,
) -> list[TargetSpec]:
    root = normalize_path(project_root)
    resolved: list[TargetSpec] = []
    seen: set[Path] = set()
    for raw in paths:
        path = normalize_path(raw)
        if path == root or root not in path.parents:
            raise TargetError(f"Target is outside the project root {root}: {path}")
        if path.is_dir() and not path.is_symlink():
            kind = "directory"
        elif path.is_file() or path.is_symlink():
            kind = "file"
        else:
            raise TargetError(f"Target does not exist: {path}")
        if path in seen:
            continue
        seen.add(path)
        resolved.append(TargetSpec(kind=kind, path=str(path)))

    directories = [Path(t.path) for t in resolved if t.kind == "directory"]
    return [
        target
        for target in resolved
        if not any(d in Path(target.path).parents for d in directories)
    ]
