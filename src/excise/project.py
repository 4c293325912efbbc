from __future__ import annotations

import difflib
import fnmatch
import logging
import os
from pathlib import Path
from typing import Iterable, Iterator

from excise.errors import ProjectLoadError
from excise.models import RunContext, normalize_path
from excise.scanner import ImportDeclaration, list_imports, remove_declarations

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDES = [
    ".git/**",
    "node_modules/**",
    "dist/**",
    "build/**",
    "coverage/**",
    "**/node_modules/**",
]


class SourceFile:
    """One loaded source file with pending, not yet persisted, import removals."""

    def __init__(self, path: Path, text: str) -> None:
        self.path = path
        self.original_text = text
        self._imports = list_imports(text)
        self._removed: list[ImportDeclaration] = []

    def list_imports(self) -> list[ImportDeclaration]:
        return [decl for decl in self._imports if decl not in self._removed]

    def remove_import(self, declaration: ImportDeclaration) -> None:
        if declaration not in self._imports:
            raise ValueError(f"{declaration.specifier!r} is not declared in {self.path}")
        if declaration in self._removed:
            raise ValueError(f"{declaration.specifier!r} already removed from {self.path}")
        self._removed.append(declaration)

    @property
    def dirty(self) -> bool:
        return bool(self._removed)

    @property
    def text(self) -> str:
        return remove_declarations(self.original_text, self._removed)

    def save(self) -> None:
        if not self._removed:
            return
        text = self.text
        with self.path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        self.original_text = text
        self._imports = list_imports(text)
        self._removed = []

    def diff(self, root: Path) -> list[str]:
        rel_path = _relative(self.path, root)
        return list(
            difflib.unified_diff(
                self.original_text.splitlines(),
                self.text.splitlines(),
                fromfile=f"a/{rel_path}",
                tofile=f"b/{rel_path}",
                lineterm="",
            )
        )


class ProjectIndex:
    def __init__(self, context: RunContext, files: list[SourceFile]) -> None:
        self.context = context
        self.files = files

    @classmethod
    def load(cls, context: RunContext) -> "ProjectIndex":
        base_dir = context.base_dir
        if not base_dir.is_dir():
            raise ProjectLoadError(f"Project directory does not exist: {base_dir}")
        files: list[SourceFile] = []
        for path in _collect_files(base_dir, context.source_extensions, context.exclude):
            try:
                with path.open(encoding="utf-8", newline="") as handle:
                    text = handle.read()
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Skipping unreadable source file %s: %s", path, exc)
                continue
            files.append(SourceFile(path, text))
        logger.debug("Loaded %d source files from %s", len(files), base_dir)
        return cls(context, files)

    def __iter__(self) -> Iterator[SourceFile]:
        return iter(self.files)


def _collect_files(
    base_dir: Path,
    extensions: Iterable[str],
    exclude: Iterable[str],
) -> list[Path]:
    exclude_patterns = DEFAULT_EXCLUDES + list(exclude)
    suffixes = tuple(extensions)
    results: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(base_dir):
        rel_dir = Path(dirpath).relative_to(base_dir).as_posix()
        if rel_dir != "." and _matches(rel_dir + "/", exclude_patterns):
            dirnames[:] = []
            continue
        for name in filenames:
            if not name.endswith(suffixes):
                continue
            full_path = Path(dirpath) / name
            rel_path = full_path.relative_to(base_dir).as_posix()
            if _matches(rel_path, exclude_patterns):
                continue
            results.append(normalize_path(full_path))
    results.sort(key=lambda p: p.as_posix())
    return results


def _matches(path: str, patterns: Iterable[str]) -> bool:
    return any(fnmatch.fnmatch(path, pattern) for pattern in patterns)


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()
