from __future__ import annotations

"""Functional test bootstrap for the program question bank service.

Points the app at a file-backed SQLite database under tmp/, applies the SQL
migrations once per session and empties every table before each test so
tests never see each other's programs or questions.
"""

import os
import pathlib

import pytest

_ROOT = pathlib.Path(__file__).resolve().parents[2]
_DB_FILE = _ROOT / "tmp" / "functional_tests.db"
_DB_FILE.parent.mkdir(parents=True, exist_ok=True)
if _DB_FILE.exists():
    _DB_FILE.unlink()

os.environ["TEST_DATABASE_URL"] = f"sqlite:///{_DB_FILE}"
os.environ["MIGRATIONS_DIR"] = str(_ROOT / "migrations")
os.environ["AUTO_APPLY_MIGRATIONS"] = "1"

from sqlalchemy import text as sql_text  # noqa: E402

from app.db.base import get_engine, reset_engine  # noqa: E402
from app.db.migrations_runner import apply_migrations  # noqa: E402
from app.logic.events import get_buffered_events  # noqa: E402
from app.logic.question_definitions import (  # noqa: E402
    EnumeratorQuestion,
    QuestionCatalog,
    RepeatedQuestion,
    SimpleQuestion,
)


@pytest.fixture(scope="session", autouse=True)
def functional_sqlite_bootstrap():
    """Session-level bootstrap: apply migrations once for the shared DB."""
    reset_engine()
    apply_migrations(get_engine(), migrations_dir=os.environ["MIGRATIONS_DIR"])
    yield
    reset_engine()


@pytest.fixture(autouse=True)
def clean_tables():
    eng = get_engine()
    with eng.begin() as conn:
        conn.execute(sql_text("DELETE FROM block_questions"))
        conn.execute(sql_text("DELETE FROM blocks"))
        conn.execute(sql_text("DELETE FROM programs"))
        conn.execute(sql_text("DELETE FROM questions WHERE enumerator_id IS NOT NULL"))
        conn.execute(sql_text("DELETE FROM questions"))
    get_buffered_events(clear=True)
    yield


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from app.main import create_app

    with TestClient(create_app()) as c:
        yield c


@pytest.fixture
def catalog() -> QuestionCatalog:
    """Address, Name, Text, one enumerator and a repeated text scoped to it."""
    return QuestionCatalog(
        [
            SimpleQuestion(id="apc-address", name="apc-address", kind="address"),
            SimpleQuestion(id="apc-name", name="apc-name", kind="name"),
            SimpleQuestion(id="apc-text", name="apc-text", kind="text"),
            EnumeratorQuestion(id="apc-enumerator", name="apc-enumerator"),
            RepeatedQuestion(
                id="apc-repeated",
                name="apc-repeated",
                kind="repeated_text",
                scope_enumerator_id="apc-enumerator",
            ),
        ]
    )
