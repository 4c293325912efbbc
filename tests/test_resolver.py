from __future__ import annotations

from pathlib import Path

from excise.models import RunContext
from excise.resolver import is_relative, resolve, strip_extension


def _write(path: Path, content: str = "export {}\n") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


def _context(root: Path, **kwargs) -> RunContext:
    return RunContext(project_root=root, base_dir=root / "src", **kwargs)


def test_resolves_direct_file(tmp_path: Path) -> None:
    importer = tmp_path / "src" / "app.ts"
    _write(importer)
    _write(tmp_path / "src" / "foo.ts")
    _write(tmp_path / "src" / "foo" / "index.ts")

    assert resolve("./foo", importer, _context(tmp_path)) == tmp_path / "src" / "foo.ts"


def test_falls_back_to_index_file(tmp_path: Path) -> None:
    importer = tmp_path / "src" / "app.ts"
    _write(importer)
    _write(tmp_path / "src" / "foo" / "index.ts")

    resolved = resolve("./foo", importer, _context(tmp_path))

    assert resolved == tmp_path / "src" / "foo" / "index.ts"


def test_unresolved_when_nothing_exists(tmp_path: Path) -> None:
    importer = tmp_path / "src" / "app.ts"
    _write(importer)

    assert resolve("./missing", importer, _context(tmp_path)) is None
    assert resolve("react", importer, _context(tmp_path)) is None
    assert resolve("@scope/pkg", importer, _context(tmp_path)) is None


def test_extension_priority_order(tmp_path: Path) -> None:
    importer = tmp_path / "src" / "app.ts"
    _write(importer)
    for name in ("widget.jsx", "widget.js", "widget.tsx"):
        _write(tmp_path / "src" / name)
    context = _context(tmp_path)

    assert resolve("./widget", importer, context) == tmp_path / "src" / "widget.tsx"

    _write(tmp_path / "src" / "widget.ts")
    assert resolve("./widget", importer, context) == tmp_path / "src" / "widget.ts"


def test_known_extension_in_specifier_is_stripped(tmp_path: Path) -> None:
    importer = tmp_path / "src" / "app.ts"
    _write(importer)
    _write(tmp_path / "src" / "helper.ts")
    _write(tmp_path / "src" / "user.service.ts")

    context = _context(tmp_path)
    assert resolve("./helper.js", importer, context) == tmp_path / "src" / "helper.ts"
    assert resolve("./user.service", importer, context) == tmp_path / "src" / "user.service.ts"


def test_parent_and_current_directory_specifiers(tmp_path: Path) -> None:
    importer = tmp_path / "src" / "feature" / "view.ts"
    _write(importer)
    _write(tmp_path / "src" / "feature" / "index.ts")
    _write(tmp_path / "src" / "shared" / "util.ts")
    context = _context(tmp_path)

    assert resolve(".", importer, context) == tmp_path / "src" / "feature" / "index.ts"
    assert resolve("../shared/util", importer, context) == tmp_path / "src" / "shared" / "util.ts"


def test_alias_prefix_is_substituted(tmp_path: Path) -> None:
    importer = tmp_path / "src" / "deep" / "nested" / "app.ts"
    _write(importer)
    _write(tmp_path / "src" / "utils" / "helper.ts")
    context = _context(
        tmp_path,
        aliases={"@/": tmp_path / "src", "@utils": tmp_path / "src" / "utils"},
    )

    assert resolve("@/utils/helper", importer, context) == tmp_path / "src" / "utils" / "helper.ts"
    assert resolve("@utils/helper", importer, context) == tmp_path / "src" / "utils" / "helper.ts"
    assert resolve("@other/helper", importer, context) is None


def test_helpers() -> None:
    extensions = (".ts", ".tsx", ".js", ".jsx")
    assert strip_extension("foo.tsx", extensions) == "foo"
    assert strip_extension("foo.service", extensions) == "foo.service"
    assert strip_extension(".ts", extensions) == ".ts"
    assert is_relative("./a") and is_relative("../a") and is_relative(".")
    assert not is_relative(".hidden") and not is_relative("pkg")
