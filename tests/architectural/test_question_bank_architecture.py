"""Architectural tests for the program question bank service.

Static checks only: modules are parsed with ``ast`` and inspected for
imports and names, so nothing here touches the database or the app.

- the engine and the structure snapshots stay free of web and SQL imports
- route handlers never issue SQL or set ETag headers themselves
- every domain error code has an HTTP status
- SQL migrations exist and are applied in order
"""

from __future__ import annotations

import ast
import inspect
from pathlib import Path
from typing import Iterable

import pytest

ROOT = Path(__file__).resolve().parents[2]
APP = ROOT / "app"

PURE_MODULES = (
    APP / "logic" / "eligibility.py",
    APP / "logic" / "block_mutations.py",
    APP / "logic" / "invariants.py",
    APP / "logic" / "program_structure.py",
    APP / "logic" / "question_definitions.py",
    APP / "models" / "question_kind.py",
)
FORBIDDEN_IN_PURE = ("sqlalchemy", "fastapi", "starlette", "pydantic", "app.db", "app.http", "app.routes")


def _parse_ast(path: Path) -> ast.AST:
    assert path.exists(), f"Required module missing: {path}"
    try:
        return ast.parse(path.read_text(encoding="utf-8"))
    except SyntaxError as exc:
        pytest.fail(f"Syntax error in {path}: {exc}")


def _imported_modules(tree: ast.AST) -> Iterable[str]:
    for n in ast.walk(tree):
        if isinstance(n, ast.Import):
            for alias in n.names:
                yield alias.name
        elif isinstance(n, ast.ImportFrom) and n.module:
            yield n.module


def _iter_py_files(root: Path) -> Iterable[Path]:
    for path in root.rglob("*.py"):
        if "__pycache__" in path.parts:
            continue
        yield path


@pytest.mark.parametrize("path", PURE_MODULES, ids=lambda p: p.name)
def test_engine_modules_have_no_framework_imports(path: Path) -> None:
    offenders = [mod for mod in _imported_modules(_parse_ast(path)) if mod.startswith(FORBIDDEN_IN_PURE)]
    assert not offenders, f"{path.name} imports {offenders}"


def test_routes_do_not_touch_sql() -> None:
    for path in _iter_py_files(APP / "routes"):
        mods = list(_imported_modules(_parse_ast(path)))
        assert not [m for m in mods if m.startswith("sqlalchemy") or m.startswith("app.db")], path.name


def test_routes_emit_etags_through_the_emitter() -> None:
    for path in _iter_py_files(APP / "routes"):
        tree = _parse_ast(path)
        for n in ast.walk(tree):
            if not isinstance(n, ast.Assign):
                continue
            for tgt in n.targets:
                if isinstance(tgt, ast.Subscript) and isinstance(tgt.slice, ast.Constant):
                    assert "etag" not in str(tgt.slice.value).lower(), f"{path.name} sets an ETag header directly"


def test_every_domain_error_has_a_status() -> None:
    from app.http.error_mapping import ERROR_MAP
    from app.logic import errors

    codes = {
        cls.code
        for _, cls in inspect.getmembers(errors, inspect.isclass)
        if issubclass(cls, errors.ProgramEditorError) and cls is not errors.ProgramEditorError
    }
    assert codes, "no domain errors found"
    assert codes <= set(ERROR_MAP), f"unmapped codes: {sorted(codes - set(ERROR_MAP))}"


def test_compute_bank_is_a_module_level_function() -> None:
    tree = _parse_ast(APP / "logic" / "eligibility.py")
    top_level = {n.name for n in tree.body if isinstance(n, ast.FunctionDef)}  # type: ignore[attr-defined]
    assert {"compute_bank", "block_state", "is_eligible"} <= top_level


def test_migrations_are_ordered_sql_files() -> None:
    files = sorted(p.name for p in (ROOT / "migrations").glob("*.sql"))
    assert files[:2] == ["001_question_catalog.sql", "002_program_structure.sql"]
    ddl = (ROOT / "migrations" / "002_program_structure.sql").read_text(encoding="utf-8")
    assert "block_questions" in ddl
    assert "UNIQUE (program_id, question_id)" in ddl
