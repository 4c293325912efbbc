from __future__ import annotations

import shutil
from pathlib import Path

from excise.engine import remove_and_delete
from excise.models import RunContext, normalize_targets


def test_fixture_project_removal(tmp_path: Path) -> None:
    fixture_root = Path(__file__).parent / "fixtures" / "sample_app"
    root = tmp_path / "sample_app"
    shutil.copytree(fixture_root, root)
    src = root / "src"
    untouched = {
        path: path.read_bytes()
        for path in (src / "app.ts", src / "reports" / "summary.ts", src / "shared" / "index.ts")
    }

    targets = normalize_targets([src / "shared" / "format", src / "legacy"], root)
    audit = remove_and_delete(targets, RunContext(project_root=root, base_dir=src))

    assert (src / "main.ts").read_text() == (
        "import { bootstrap } from './app'\n"
        "import { Logger } from './shared/logger'\n"
        "import type { Settings } from './shared'\n"
        "\n"
        "const settings: Settings = { verbose: true }\n"
        "\n"
        "bootstrap(new Logger(), formatDate, legacy, settings)\n"
    )
    for path, content in untouched.items():
        assert path.read_bytes() == content
    assert not (src / "legacy").exists()
    assert not (src / "shared" / "format").exists()
    assert (src / "reports" / "date.ts").exists()
    assert [
        (Path(r.removed_target_path).relative_to(root).as_posix(), r.removed_from[0].imported_names)
        for r in audit.records
    ] == [
        ("src/legacy/index.ts", ["legacy"]),
        ("src/shared/format/date.ts", ["formatDate"]),
    ]
    assert audit.summary["modified_files"] == 1
