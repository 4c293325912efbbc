from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

from excise.models import AuditResult

AUDIT_PREFIX = "excise_audit_"


def audit_stem(directory: Path, now: datetime | None = None) -> Path:
    timestamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    stem = directory / f"{AUDIT_PREFIX}{timestamp}"
    counter = 1
    while stem.with_suffix(".json").exists():
        stem = directory / f"{AUDIT_PREFIX}{timestamp}_{counter}"
        counter += 1
    return stem


def write_audit(audit: AuditResult, directory: Path, stem: Path | None = None) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    json_path = (stem or audit_stem(directory)).with_suffix(".json")
    json_path.write_text(json.dumps(asdict(audit), indent=2, sort_keys=True) + "\n")
    return json_path


def write_diff(diff_text: str, stem: Path) -> Path:
    diff_path = stem.with_suffix(".diff")
    diff_path.write_text(diff_text)
    return diff_path


def render_audit(audit: AuditResult) -> str:
    root = Path(audit.root)
    header = "Dry-run: nothing was written or deleted." if audit.dry_run else "Removal complete."
    lines = [header, ""]
    if not audit.records:
        lines.append("No imports referenced the removed files.")
    for record in audit.records:
        lines.append(f"Imports of {_rel(record.removed_target_path, root)} removed from:")
        for entry in record.removed_from:
            names = ", ".join(entry.imported_names) or "(side effect)"
            lines.append(f"  - {_rel(entry.importer_path, root)}: {names}")
    if audit.missing_targets:
        lines.append("")
        lines.append("Already absent (skipped):")
        lines.extend(f"  - {_rel(path, root)}" for path in audit.missing_targets)
    if audit.failed_saves:
        lines.append("")
        lines.append("Failed to save:")
        for row in audit.failed_saves:
            lines.append(f"  - {_rel(row['path'], root)}: {row['error']}")
    if audit.failed_deletes:
        lines.append("")
        lines.append("Failed to delete:")
        for row in audit.failed_deletes:
            lines.append(f"  - {_rel(row['path'], root)}: {row['error']}")
    summary = audit.summary
    lines.append("")
    lines.append(
        f"Targets: {summary.get('targets', len(audit.targets))}, "
        f"target files: {summary.get('target_files', 0)}, "
        f"modified files: {summary.get('modified_files', 0)}, "
        f"removed imports: {summary.get('removed_imports', 0)}"
    )
    return "\n".join(lines) + "\n"


def render_diff(diffs: list[list[str]]) -> str:
    lines: list[str] = []
    for diff in diffs:
        lines.extend(diff)
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def _rel(path: str, root: Path) -> str:
    try:
        return Path(path).relative_to(root).as_posix()
    except ValueError:
        return path
