from __future__ import annotations

import argparse
import logging
from collections.abc import Iterable
from pathlib import Path

from excise import __version__
from excise.errors import ExciseError
from excise.project import SourceFile


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="excise",
        description=(
            "Delete TypeScript files or directories and remove every import "
            "that references them. Apply mode requires --yes confirmation."
        ),
    )
    parser.add_argument(
        "targets",
        nargs="+",
        help="Files or directories to remove (relative to --project)",
    )
    parser.add_argument("--project", default=".", help="Project root directory")
    parser.add_argument(
        "--config",
        default=None,
        help="Config file (default: excise.json in the project root)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--dry-run", action="store_true", help="Dry-run (default)")
    mode.add_argument(
        "--apply",
        action="store_true",
        help="Rewrite importers and delete the targets",
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Confirm apply mode (required with --apply)",
    )
    parser.add_argument(
        "--audit-dir",
        default=None,
        help="Directory for the audit artifacts (overrides audit_dir in config)",
    )
    parser.add_argument(
        "--diff",
        action="store_true",
        help="Also write a unified diff of every modified importer",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    root = Path(args.project).resolve()
    if not root.exists() or not root.is_dir():
        raise SystemExit(f"Path does not exist or is not a directory: {root}")
    if args.apply and not args.yes:
        raise SystemExit("Refusing to apply without --yes confirmation.")

    from excise.config import build_context, load_config
    from excise.engine import remove_and_delete
    from excise.models import normalize_targets
    from excise.report import audit_stem, render_audit, render_diff, write_audit, write_diff

    diffs: list[list[str]] = []

    def collect_diff(source_file: SourceFile) -> None:
        diffs.append(source_file.diff(root))

    try:
        config = load_config(root, Path(args.config) if args.config else None)
        context = build_context(root, config)
        targets = normalize_targets(
            [_target_path(raw, root) for raw in args.targets], root
        )
        audit = remove_and_delete(
            targets,
            context,
            dry_run=not args.apply,
            on_change=collect_diff if args.diff else None,
        )
    except ExciseError as exc:
        raise SystemExit(str(exc)) from exc

    audit_dir = Path(args.audit_dir) if args.audit_dir else root / config.audit_dir
    stem = audit_stem(audit_dir)
    json_path = write_audit(audit, audit_dir, stem)
    print(render_audit(audit), end="")
    print(f"Audit written to {json_path}")
    if args.diff:
        diff_path = write_diff(render_diff(diffs), stem)
        print(f"Diff written to {diff_path}")
    return 0


def _target_path(raw: str, root: Path) -> Path:
    path = Path(raw)
    return path if path.is_absolute() else root / path


if __name__ == "__main__":
    raise SystemExit(main())
