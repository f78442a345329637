"""依存境界（純粋な操作群 / 永続化・ドキュメント）の破りを検出するテスト。"""

from __future__ import annotations

import ast
from pathlib import Path

_VARIANTS_PKG = "shadervariants.core.variants"

# I/O・設定・ドキュメントに依存してはいけない（純粋な値と操作だけの）モジュール。
_PURE_MODULES = (
    "catalog",
    "defrag_ops",
    "errors",
    "expand_ops",
    "history",
    "notifications",
    "options",
    "record",
    "session",
    "sparse_ops",
    "stable_ids",
    "variant_list",
)

_IO_PREFIXES = (
    f"{_VARIANTS_PKG}.codec",
    f"{_VARIANTS_PKG}.persistence",
    f"{_VARIANTS_PKG}.document",
    "shadervariants.core.runtime_config",
    "yaml",
    "json",
    "pathlib",
)


def _repo_root() -> Path:
    path = Path(__file__).resolve()
    for parent in path.parents:
        if (parent / "src").is_dir() and (parent / "tests").is_dir():
            return parent
    raise RuntimeError("repo root が見つからない")


def _module_name_for_path(*, path: Path, src_root: Path) -> tuple[str, bool]:
    rel = path.relative_to(src_root)
    parts = list(rel.parts)
    if not parts or not parts[-1].endswith(".py"):
        raise ValueError(f"python ファイルではない: {rel}")

    is_package = parts[-1] == "__init__.py"
    if is_package:
        parts = parts[:-1]
    else:
        parts[-1] = parts[-1].removesuffix(".py")
    return ".".join(parts), is_package


def _resolve_importfrom_targets(
    *,
    current_module: str,
    is_package: bool,
    node: ast.ImportFrom,
) -> set[str]:
    level = int(node.level or 0)
    if level == 0:
        base = str(node.module or "")
    else:
        current_package = current_module if is_package else current_module.rsplit(".", 1)[0]
        parts = current_package.split(".")
        up = level - 1
        if up >= len(parts):
            raise ValueError(
                "相対 import の解決に失敗: "
                f"current_module={current_module!r}, level={level}, module={node.module!r}"
            )
        base = ".".join(parts[: len(parts) - up])
        if node.module is not None:
            base = f"{base}.{node.module}"

    if not base:
        return set()
    targets = {base}
    for alias in node.names:
        if alias.name != "*":
            targets.add(f"{base}.{alias.name}")
    return targets


def _import_modules_in_file(*, path: Path, src_root: Path) -> set[str]:
    current_module, is_package = _module_name_for_path(path=path, src_root=src_root)
    tree = ast.parse(path.read_text(encoding="utf-8"))
    modules: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            modules.update(str(alias.name) for alias in node.names)
        elif isinstance(node, ast.ImportFrom):
            modules.update(
                _resolve_importfrom_targets(
                    current_module=current_module,
                    is_package=is_package,
                    node=node,
                )
            )
    return modules


def test_pure_variant_modules_do_not_depend_on_io_or_config() -> None:
    repo_root = _repo_root()
    src_root = repo_root / "src"
    package_dir = src_root / "shadervariants" / "core" / "variants"

    violations: list[str] = []
    for name in _PURE_MODULES:
        path = package_dir / f"{name}.py"
        assert path.is_file(), f"モジュールが見つからない: {path}"
        modules = _import_modules_in_file(path=path, src_root=src_root)
        bad = sorted(m for m in modules if m.startswith(_IO_PREFIXES))
        if bad:
            violations.append(f"{path.relative_to(repo_root)}: {', '.join(bad)}")

    if violations:
        joined = "\n".join(violations)
        raise AssertionError(f"依存境界違反の import を検出:\n{joined}")


def test__resolve_importfrom_targets_handles_relative_imports() -> None:
    node = ast.parse("from .persistence import save_variant_list\n").body[0]
    assert isinstance(node, ast.ImportFrom)
    got = _resolve_importfrom_targets(
        current_module=f"{_VARIANTS_PKG}.document",
        is_package=False,
        node=node,
    )
    assert f"{_VARIANTS_PKG}.persistence" in got
    assert f"{_VARIANTS_PKG}.persistence.save_variant_list" in got

    node = ast.parse("from ..runtime_config import runtime_config\n").body[0]
    assert isinstance(node, ast.ImportFrom)
    got = _resolve_importfrom_targets(
        current_module=f"{_VARIANTS_PKG}.document",
        is_package=False,
        node=node,
    )
    assert "shadervariants.core.runtime_config" in got
