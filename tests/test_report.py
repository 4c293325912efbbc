from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from excise.models import AuditResult, RemovalRecord, RemovedFrom, TargetSpec
from excise.report import audit_stem, render_audit, render_diff, write_audit


def _audit(root: Path, **kwargs) -> AuditResult:
    return AuditResult(
        root=str(root),
        generated_at="2024-01-01T00:00:00Z",
        dry_run=False,
        targets=[TargetSpec(kind="file", path=str(root / "src" / "helper.ts"))],
        records=[
            RemovalRecord(
                removed_target_path=str(root / "src" / "helper.ts"),
                removed_from=[
                    RemovedFrom(importer_path=str(root / "src" / "app.ts"), imported_names=["doThing"]),
                    RemovedFrom(importer_path=str(root / "src" / "setup.ts"), imported_names=[]),
                ],
            )
        ],
        summary={"targets": 1, "target_files": 1, "modified_files": 2, "removed_imports": 2},
        **kwargs,
    )


def test_write_audit_is_timestamped_json(tmp_path: Path) -> None:
    audit = _audit(tmp_path)

    path = write_audit(audit, tmp_path / "audits")

    assert path.parent == tmp_path / "audits"
    assert path.name.startswith("excise_audit_") and path.suffix == ".json"
    data = json.loads(path.read_text())
    assert data["targets"] == [{"kind": "file", "path": str(tmp_path / "src" / "helper.ts")}]
    assert data["records"][0]["removed_from"][0]["imported_names"] == ["doThing"]
    assert data["dry_run"] is False


def test_audit_stem_avoids_collisions(tmp_path: Path) -> None:
    now = datetime(2024, 1, 2, 3, 4, 5)
    first = audit_stem(tmp_path, now)
    first.with_suffix(".json").write_text("{}")

    second = audit_stem(tmp_path, now)

    assert first.name == "excise_audit_20240102_030405"
    assert second.name == "excise_audit_20240102_030405_1"


def test_render_audit_groups_by_target(tmp_path: Path) -> None:
    audit = _audit(
        tmp_path,
        missing_targets=[str(tmp_path / "src" / "gone.ts")],
        failed_saves=[{"path": str(tmp_path / "src" / "ro.ts"), "error": "denied"}],
    )

    text = render_audit(audit)

    assert "Imports of src/helper.ts removed from:" in text
    assert "  - src/app.ts: doThing" in text
    assert "  - src/setup.ts: (side effect)" in text
    assert "Already absent (skipped):\n  - src/gone.ts" in text
    assert "  - src/ro.ts: denied" in text
    assert "removed imports: 2" in text


def test_render_diff_joins_file_diffs() -> None:
    text = render_diff([["--- a/x.ts", "+++ b/x.ts"], ["--- a/y.ts", "+++ b/y.ts"]])

    assert text == "--- a/x.ts\n+++ b/x.ts\n\n--- a/y.ts\n+++ b/y.ts\n"
