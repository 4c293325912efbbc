"""Remove target files and every import declaration that points at them."""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from pathlib import Path

from excise.errors import TargetError
from excise.models import (
    AuditResult,
    FilesToRemove,
    ImportEdge,
    RemovalRecord,
    RemovedFrom,
    RunContext,
    TargetSpec,
    normalize_path,
)
from excise.project import ProjectIndex, SourceFile
from excise.resolver import base_path, resolve, strip_extension
from excise.walker import list_files_recursive

logger = logging.getLogger(__name__)

INDEX_NAME = "index"


def remove_and_delete(
    targets: list[TargetSpec],
    context: RunContext,
    dry_run: bool = False,
    on_change: Callable[[SourceFile], None] | None = None,
) -> AuditResult:
    """Strip imports of ``targets`` from the project, then delete the targets.

    ``on_change`` is called with every modified file before it is saved. With
    ``dry_run`` nothing is written or deleted, but the audit is still built.
    """
    target_files = expand_targets(targets)
    to_remove = build_files_to_remove(target_files, context.resolve_extensions)
    project = ProjectIndex.load(context)

    removed: dict[Path, dict[Path, list[str]]] = {}
    failed_saves: list[dict[str, str]] = []
    scanned = 0
    modified = 0
    removed_imports = 0
    for source_file in project:
        if source_file.path in to_remove.file_paths:
            continue
        scanned += 1
        edges = remove_matching_imports(source_file, to_remove, context)
        if not edges:
            continue
        if on_change is not None:
            on_change(source_file)
        if not dry_run:
            try:
                source_file.save()
            except OSError as exc:
                logger.error("Failed to save %s: %s", source_file.path, exc)
                failed_saves.append({"path": str(source_file.path), "error": str(exc)})
                continue
        modified += 1
        removed_imports += len(edges)
        for edge in edges:
            importers = removed.setdefault(edge.resolved_path, {})
            importers.setdefault(edge.importer_path, []).extend(edge.imported_names)

    if dry_run:
        missing: list[str] = []
        failed_deletes: list[dict[str, str]] = []
    else:
        missing, failed_deletes = delete_targets(targets)

    records = _build_records(removed)
    summary = {
        "targets": len(targets),
        "target_files": len(to_remove.file_paths),
        "scanned_files": scanned,
        "modified_files": modified,
        "removed_imports": removed_imports,
        "missing_targets": len(missing),
        "failed_saves": len(failed_saves),
        "failed_deletes": len(failed_deletes),
    }
    return AuditResult(
        root=str(context.project_root),
        generated_at=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        dry_run=dry_run,
        targets=list(targets),
        records=records,
        missing_targets=missing,
        failed_saves=failed_saves,
        failed_deletes=failed_deletes,
        summary=summary,
    )


def expand_targets(targets: Iterable[TargetSpec]) -> list[Path]:
    files: list[Path] = []
    for target in targets:
        path = normalize_path(target.path)
        if target.kind == "directory":
            files.extend(list_files_recursive(path))
        elif target.kind == "file":
            files.append(path)
        else:
            raise TargetError(f"Unknown target kind {target.kind!r} for {path}")
    return files


def build_files_to_remove(
    files: Iterable[Path],
    extensions: tuple[str, ...],
) -> FilesToRemove:
    to_remove = FilesToRemove()
    for path in files:
        path = normalize_path(path)
        name = strip_extension(path.name, extensions)
        to_remove.file_paths.add(path)
        to_remove.import_names.add(name)
        # a directory is imported by its own name and resolves to its index file
        if name == INDEX_NAME and path.parent.name:
            to_remove.import_names.add(path.parent.name)
    return to_remove


def specifier_name(specifier: str, extensions: tuple[str, ...]) -> str | None:
    """Terminal segment of ``specifier`` without its extension.

    None means the name can not be known without resolving (``.``, ``..``).
    """
    segment = specifier.rstrip("/").rsplit("/", 1)[-1]
    if segment in {"", ".", ".."}:
        return None
    return strip_extension(segment, extensions)


def remove_matching_imports(
    source_file: SourceFile,
    to_remove: FilesToRemove,
    context: RunContext,
) -> list[ImportEdge]:
    edges: list[ImportEdge] = []
    for declaration in source_file.list_imports():
        base = base_path(declaration.specifier, source_file.path, context)
        if base is None:
            continue
        # aliases are substituted first so the terminal name is the real one
        name = specifier_name(os.path.normpath(base), context.resolve_extensions)
        if name is not None and name not in to_remove.import_names:
            continue
        resolved = resolve(declaration.specifier, source_file.path, context)
        if resolved is None or resolved not in to_remove.file_paths:
            continue
        source_file.remove_import(declaration)
        logger.debug(
            "Removed import of %s from %s:%d",
            declaration.specifier,
            source_file.path,
            declaration.line,
        )
        edges.append(
            ImportEdge(
                importer_path=source_file.path,
                specifier=declaration.specifier,
                resolved_path=resolved,
                imported_names=tuple(declaration.imported_names),
            )
        )
    return edges


def delete_targets(targets: Iterable[TargetSpec]) -> tuple[list[str], list[dict[str, str]]]:
    missing: list[str] = []
    failed: list[dict[str, str]] = []
    for target in targets:
        path = normalize_path(target.path)
        try:
            if target.kind == "directory" and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except FileNotFoundError:
            logger.warning("Target already absent, skipping delete: %s", path)
            missing.append(str(path))
        except OSError as exc:
            logger.error("Failed to delete %s: %s", path, exc)
            failed.append({"path": str(path), "error": str(exc)})
    return missing, failed


def _build_records(removed: dict[Path, dict[Path, list[str]]]) -> list[RemovalRecord]:
    records: list[RemovalRecord] = []
    for target_path in sorted(removed, key=lambda p: p.as_posix()):
        importers = removed[target_path]
        records.append(
            RemovalRecord(
                removed_target_path=str(target_path),
                removed_from=[
                    RemovedFrom(importer_path=str(path), imported_names=importers[path])
                    for path in sorted(importers, key=lambda p: p.as_posix())
                ],
            )
        )
    return records
