"""Question catalog repository.

Encapsulates DB reads/writes for question definitions, keeping the HTTP layer
free of direct SQL. Definitions are validated on create; on update only the
mutable members (text, help text, description) may change.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection

from app.db.base import get_engine
from app.logic.errors import InvalidQuestion, InvalidQuestionUpdate, QuestionConflict, QuestionNotFound
from app.logic.question_definitions import QuestionCatalog, question_from_row
from app.models.question_kind import QuestionKind, is_known_kind, is_repeated_kind

logger = logging.getLogger(__name__)

_COLUMNS = "question_id, name, kind, question_text, help_text, description, enumerator_id"


def _row_to_dict(row: Any) -> Dict[str, Any]:
    return {
        "question_id": str(row[0]),
        "name": str(row[1]),
        "kind": str(row[2]),
        "question_text": str(row[3] or ""),
        "help_text": str(row[4] or ""),
        "description": str(row[5] or ""),
        "enumerator_id": str(row[6]) if row[6] is not None else None,
    }


def _fetch(conn: Connection, question_id: str) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        sql_text(f"SELECT {_COLUMNS} FROM questions WHERE question_id = :qid"),
        {"qid": str(question_id)},
    ).fetchone()
    return _row_to_dict(row) if row else None


def _validate_definition(conn: Connection, name: str, kind: str, enumerator_id: Optional[str]) -> List[str]:
    errors: List[str] = []
    if not name.strip():
        errors.append("question name must not be blank")
    if not is_known_kind(kind):
        errors.append(f"unknown question kind '{kind}'")
        return errors
    if is_repeated_kind(kind):
        if not enumerator_id:
            errors.append(f"'{kind}' questions require an enumerator_id")
        else:
            scope = _fetch(conn, enumerator_id)
            if scope is None:
                errors.append(f"enumerator question '{enumerator_id}' does not exist")
            elif scope["kind"] != QuestionKind.ENUMERATOR:
                errors.append(f"question '{enumerator_id}' is a '{scope['kind']}' question, not an enumerator")
    elif enumerator_id:
        errors.append(f"'{kind}' questions cannot be scoped to an enumerator")
    return errors


def _find_conflict(conn: Connection, name: str, enumerator_id: Optional[str]) -> Optional[str]:
    """Return the id of a question with the same name in the same enumerator scope."""
    if enumerator_id:
        row = conn.execute(
            sql_text("SELECT question_id FROM questions WHERE name = :n AND enumerator_id = :e"),
            {"n": name, "e": enumerator_id},
        ).fetchone()
    else:
        row = conn.execute(
            sql_text("SELECT question_id FROM questions WHERE name = :n AND enumerator_id IS NULL"),
            {"n": name},
        ).fetchone()
    return str(row[0]) if row else None


def create_question(
    *,
    name: str,
    kind: str,
    question_text: str = "",
    help_text: str = "",
    description: str = "",
    enumerator_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Insert a new question definition and return its row.

    Raises InvalidQuestion when the definition is malformed and
    QuestionConflict when a question with the same name already exists in
    the same enumerator scope.
    """
    name = (name or "").strip()
    kind = (kind or "").strip().lower()
    enumerator_id = enumerator_id or None
    eng = get_engine()
    with eng.begin() as conn:
        errors = _validate_definition(conn, name, kind, enumerator_id)
        if errors:
            raise InvalidQuestion(errors)
        conflict_id = _find_conflict(conn, name, enumerator_id)
        if conflict_id is not None:
            if enumerator_id:
                msg = f"Question '{name}' with enumerator id {enumerator_id} conflicts with question id: {conflict_id}"
            else:
                msg = f"Question '{name}' conflicts with question id: {conflict_id}"
            raise QuestionConflict(msg)
        next_seq = conn.execute(sql_text("SELECT COALESCE(MAX(seq), 0) + 1 FROM questions")).scalar_one()
        question_id = str(uuid.uuid4())
        conn.execute(
            sql_text(
                "INSERT INTO questions (question_id, seq, name, kind, question_text, help_text, description, enumerator_id) "
                "VALUES (:qid, :seq, :name, :kind, :qt, :ht, :d, :e)"
            ),
            {
                "qid": question_id,
                "seq": int(next_seq),
                "name": name,
                "kind": kind,
                "qt": question_text or "",
                "ht": help_text or "",
                "d": description or "",
                "e": enumerator_id,
            },
        )
        created = _fetch(conn, question_id)
    logger.info("question_created question_id=%s name=%s kind=%s enumerator_id=%s", question_id, name, kind, enumerator_id)
    return created  # type: ignore[return-value]


def update_question(
    question_id: str,
    *,
    name: Optional[str] = None,
    kind: Optional[str] = None,
    enumerator_id: Optional[str] = None,
    question_text: Optional[str] = None,
    help_text: Optional[str] = None,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    """Update the mutable members of a question.

    Immutable members (name, kind, enumerator id) may be echoed back but not
    changed; every mismatch is reported in one InvalidQuestionUpdate.
    """
    eng = get_engine()
    with eng.begin() as conn:
        current = _fetch(conn, question_id)
        if current is None:
            raise QuestionNotFound(question_id)
        errors: List[str] = []
        if name is not None and name.strip() != current["name"]:
            errors.append(f"question names mismatch: {current['name']} does not match {name.strip()}")
        if kind is not None and kind.strip().lower() != current["kind"]:
            errors.append(f"question kinds mismatch: {current['kind']} does not match {kind.strip().lower()}")
        if enumerator_id is not None and (enumerator_id or None) != current["enumerator_id"]:
            errors.append(
                "question enumerator ids mismatch: "
                f"{current['enumerator_id'] or '[no enumerator]'} does not match {enumerator_id or '[no enumerator]'}"
            )
        if errors:
            raise InvalidQuestionUpdate(errors)
        conn.execute(
            sql_text(
                "UPDATE questions SET question_text = :qt, help_text = :ht, description = :d WHERE question_id = :qid"
            ),
            {
                "qt": current["question_text"] if question_text is None else question_text,
                "ht": current["help_text"] if help_text is None else help_text,
                "d": current["description"] if description is None else description,
                "qid": question_id,
            },
        )
        updated = _fetch(conn, question_id)
    logger.info("question_updated question_id=%s", question_id)
    return updated  # type: ignore[return-value]


def get_question(question_id: str) -> Dict[str, Any]:
    eng = get_engine()
    with eng.connect() as conn:
        row = _fetch(conn, question_id)
    if row is None:
        raise QuestionNotFound(question_id)
    return row


def list_questions() -> List[Dict[str, Any]]:
    """List every question definition in catalog insertion order."""
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(sql_text(f"SELECT {_COLUMNS} FROM questions ORDER BY seq ASC")).fetchall()
    return [_row_to_dict(r) for r in rows]


def list_enumerator_questions() -> List[Dict[str, Any]]:
    return [q for q in list_questions() if q["kind"] == QuestionKind.ENUMERATOR]


def load_catalog() -> QuestionCatalog:
    """Return an immutable catalog snapshot for the eligibility engine."""
    return QuestionCatalog(question_from_row(row) for row in list_questions())


__all__ = [
    "create_question",
    "update_question",
    "get_question",
    "list_questions",
    "list_enumerator_questions",
    "load_catalog",
]
