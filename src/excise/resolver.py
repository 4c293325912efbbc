"""Resolve relative module specifiers to files on disk."""

from __future__ import annotations

import os
from pathlib import Path

from excise.models import RunContext, normalize_path

RELATIVE_PREFIXES = ("./", "../")


def is_relative(specifier: str) -> bool:
    return specifier in {".", ".."} or specifier.startswith(RELATIVE_PREFIXES)


def strip_extension(path: str, extensions: tuple[str, ...]) -> str:
    """Drop one trailing known source extension, leaving other dots alone."""
    for ext in extensions:
        if path.endswith(ext) and len(path) > len(ext):
            return path[: -len(ext)]
    return path


def resolve(specifier: str, importer: Path, context: RunContext) -> Path | None:
    """Map ``specifier`` imported from ``importer`` to an absolute file path.

    Returns None for anything that is not relative or aliased, and for
    specifiers that do not point at an existing file.
    """
    base = base_path(specifier, importer, context)
    if base is None:
        return None
    resolved = _first_existing(base, context.resolve_extensions)
    if resolved is not None:
        return resolved
    return _first_existing(os.path.join(base, "index"), context.resolve_extensions)


def base_path(specifier: str, importer: Path, context: RunContext) -> str | None:
    """Specifier joined onto the importer directory or its alias target.

    None for bare package specifiers.
    """
    if is_relative(specifier):
        return os.path.join(os.path.dirname(importer), specifier)
    for prefix in sorted(context.aliases, key=len, reverse=True):
        if specifier.startswith(prefix):
            remainder = specifier[len(prefix) :].lstrip("/")
            return os.path.join(context.aliases[prefix], remainder)
    return None


def _first_existing(base: str, extensions: tuple[str, ...]) -> Path | None:
    stem = strip_extension(os.path.normpath(base), extensions)
    for ext in extensions:
        candidate = stem + ext
        if os.path.isfile(candidate):
            return normalize_path(candidate)
    return None
