"""依存境界（core → export → api）と外部依存の範囲を検出するテスト。"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

import pytest

_SRC = Path(__file__).resolve().parents[2] / "src"
_PKG = _SRC / "patternix"

# pyproject の dependencies と対応する import 名
_THIRD_PARTY = {"numpy", "numba", "yaml"}


def _imports(path: Path) -> set[str]:
    """ファイル内の import 先を絶対モジュール名で返す（相対 import は解決する）。"""
    package = ".".join(path.relative_to(_SRC).with_suffix("").parts)
    if path.name != "__init__.py":
        package = package.rsplit(".", 1)[0]
    else:
        package = package.removesuffix(".__init__")

    found: set[str] = set()
    for node in ast.walk(ast.parse(path.read_text(encoding="utf-8"))):
        if isinstance(node, ast.Import):
            found.update(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom):
            base = node.module or ""
            if node.level:
                parts = package.split(".")[: len(package.split(".")) - (node.level - 1)]
                base = ".".join(parts + ([node.module] if node.module else []))
            found.add(base)
            found.update(f"{base}.{a.name}" for a in node.names if a.name != "*")
    return found


def _violations(root: Path, forbidden: tuple[str, ...]) -> list[str]:
    out = []
    for path in sorted(root.rglob("*.py")):
        bad = sorted(m for m in _imports(path) if m.startswith(forbidden))
        if bad:
            out.append(f"{path.relative_to(_SRC)}: {', '.join(bad)}")
    return out


@pytest.mark.parametrize(
    ("subdir", "forbidden"),
    [
        ("core", ("patternix.export", "patternix.api", "subprocess")),
        ("core/generators", ("patternix.export", "patternix.api", "yaml")),
        ("export", ("patternix.api",)),
    ],
)
def test_layer_does_not_import_outer_layers(subdir: str, forbidden: tuple[str, ...]) -> None:
    assert _violations(_PKG / subdir, forbidden) == []


def test_only_declared_third_party_libraries_are_imported() -> None:
    stdlib = set(sys.stdlib_module_names) | {"__future__"}
    undeclared: set[str] = set()
    for path in _PKG.rglob("*.py"):
        for module in _imports(path):
            top = module.split(".", 1)[0]
            if top and top != "patternix" and top not in stdlib and top not in _THIRD_PARTY:
                undeclared.add(f"{path.relative_to(_SRC)}: {module}")
    assert sorted(undeclared) == []


def test_relative_imports_resolve_to_absolute_names() -> None:
    found = _imports(_PKG / "core" / "parameters" / "resolver.py")
    assert "patternix.core.parameters.meta.ParamMeta" in found
    assert "patternix.core.color" in found
