from __future__ import annotations

import ast
import os
from pathlib import Path

import pytest


def _require_arch_checks_enabled() -> None:
    if os.getenv("PUBKIT_ARCH_CHECKS") != "1":
        pytest.skip("architecture checks are opt-in; set PUBKIT_ARCH_CHECKS=1 to enable")


def _pubkit_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _source_files() -> list[tuple[str, ast.AST]]:
    root = _pubkit_root()
    out: list[tuple[str, ast.AST]] = []
    for path in sorted(root.rglob("*.py")):
        rel = path.relative_to(root)
        if rel.parts[0] == "test" or "__pycache__" in rel.parts:
            continue
        tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
        out.append((rel.as_posix(), tree))
    return out


def _imported_modules(tree: ast.AST) -> list[tuple[str, int]]:
    found: list[tuple[str, int]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            found.extend((alias.name, node.lineno) for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module and not node.level:
            found.append((node.module, node.lineno))
    return found


def test_subprocess_is_only_used_by_process_module() -> None:
    _require_arch_checks_enabled()

    offenders = [
        f"{rel}:{line}: imports subprocess"
        for rel, tree in _source_files()
        if rel != "platform/process.py"
        for module, line in _imported_modules(tree)
        if module == "subprocess"
    ]
    assert not offenders, "Subprocess policy violations:\n" + "\n".join(offenders)


def test_rich_is_only_imported_by_console() -> None:
    _require_arch_checks_enabled()

    offenders = [
        f"{rel}:{line}: direct rich import '{module}'"
        for rel, tree in _source_files()
        if rel != "output/console.py"
        for module, line in _imported_modules(tree)
        if module == "rich" or module.startswith("rich.")
    ]
    assert not offenders, "Rich usage policy violations:\n" + "\n".join(offenders)


def test_services_do_not_import_cli() -> None:
    _require_arch_checks_enabled()

    offenders = [
        f"{rel}:{line}: imports '{module}'"
        for rel, tree in _source_files()
        if rel.startswith("services/")
        for module, line in _imported_modules(tree)
        if module == "pubkit.cli" or module.startswith("pubkit.cli.")
    ]
    assert not offenders, "Layering violations:\n" + "\n".join(offenders)
