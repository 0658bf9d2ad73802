"""Question definitions and the immutable catalog snapshot.

A question is one of three shapes:

- ``SimpleQuestion``: a non-repeated kind (address, name, text, ...)
- ``EnumeratorQuestion``: introduces a repeatable entity
- ``RepeatedQuestion``: a repeated kind scoped to one enumerator question

The catalog snapshot is what the eligibility engine reads. It is built once
per call from the catalog store and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from app.logic.errors import CatalogInconsistency
from app.models.question_kind import QuestionKind, is_known_kind, is_repeated_kind


@dataclass(frozen=True)
class SimpleQuestion:
    id: str
    name: str
    kind: str
    text: str = ""
    help_text: str = ""
    description: str = ""


@dataclass(frozen=True)
class EnumeratorQuestion:
    id: str
    name: str
    text: str = ""
    help_text: str = ""
    description: str = ""

    @property
    def kind(self) -> str:
        return QuestionKind.ENUMERATOR


@dataclass(frozen=True)
class RepeatedQuestion:
    id: str
    name: str
    kind: str
    scope_enumerator_id: str
    text: str = ""
    help_text: str = ""
    description: str = ""


Question = Union[SimpleQuestion, EnumeratorQuestion, RepeatedQuestion]


def scope_of(question: Question) -> Optional[str]:
    """Return the enumerator id a question is scoped to, or None."""
    if isinstance(question, RepeatedQuestion):
        return question.scope_enumerator_id
    return None


def question_from_row(row: Mapping[str, Any]) -> Question:
    """Build the matching question shape from a catalog row.

    Rows must carry ``question_id``, ``name`` and ``kind``; repeated kinds
    must carry ``enumerator_id`` and other kinds must not.
    """
    qid = str(row["question_id"])
    kind = str(row["kind"])
    enumerator_id = row.get("enumerator_id")
    common = {
        "id": qid,
        "name": str(row.get("name") or ""),
        "text": str(row.get("question_text") or ""),
        "help_text": str(row.get("help_text") or ""),
        "description": str(row.get("description") or ""),
    }
    if not is_known_kind(kind):
        raise CatalogInconsistency(f"question '{qid}' has unknown kind '{kind}'")
    if is_repeated_kind(kind):
        if not enumerator_id:
            raise CatalogInconsistency(f"repeated question '{qid}' has no enumerator scope")
        return RepeatedQuestion(kind=kind, scope_enumerator_id=str(enumerator_id), **common)
    if enumerator_id:
        raise CatalogInconsistency(
            f"question '{qid}' of kind '{kind}' must not be scoped to enumerator '{enumerator_id}'"
        )
    if kind == QuestionKind.ENUMERATOR:
        return EnumeratorQuestion(**common)
    return SimpleQuestion(kind=kind, **common)


class QuestionCatalog:
    """Ordered, read-only view over every question definition."""

    def __init__(self, questions: Iterable[Question]) -> None:
        self._questions: tuple[Question, ...] = tuple(questions)
        self._by_id: Dict[str, Question] = {}
        for q in self._questions:
            if q.id in self._by_id:
                raise CatalogInconsistency(f"duplicate question id '{q.id}' in catalog")
            self._by_id[q.id] = q

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    def __len__(self) -> int:
        return len(self._questions)

    def get(self, question_id: str) -> Optional[Question]:
        return self._by_id.get(question_id)

    def ordered(self, question_ids: Iterable[str]) -> list[Question]:
        """Return the given ids as questions, in catalog insertion order."""
        wanted = set(question_ids)
        return [q for q in self._questions if q.id in wanted]

    def validate(self) -> None:
        """Raise CatalogInconsistency when a repeated question's scope does not resolve."""
        for q in self._questions:
            if not isinstance(q, RepeatedQuestion):
                continue
            scope = self._by_id.get(q.scope_enumerator_id)
            if scope is None:
                raise CatalogInconsistency(
                    f"repeated question '{q.id}' is scoped to missing enumerator '{q.scope_enumerator_id}'"
                )
            if not isinstance(scope, EnumeratorQuestion):
                raise CatalogInconsistency(
                    f"repeated question '{q.id}' is scoped to '{scope.id}' which is a '{scope.kind}' question"
                )


__all__ = [
    "SimpleQuestion",
    "EnumeratorQuestion",
    "RepeatedQuestion",
    "Question",
    "QuestionCatalog",
    "question_from_row",
    "scope_of",
]
