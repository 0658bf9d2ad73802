"""Whole-program invariant checks.

Run at the start of every bank computation and every mutation so that a
stored structure that drifted out of policy is surfaced instead of being
silently extended. Checks are global; no per-block flags are trusted.
"""

from __future__ import annotations

import logging

from app.logic.errors import StructureInconsistency
from app.logic.program_structure import Program
from app.logic.question_definitions import EnumeratorQuestion, QuestionCatalog, RepeatedQuestion, scope_of

logger = logging.getLogger(__name__)


def find_violations(program: Program, catalog: QuestionCatalog) -> list[str]:
    """Return human-readable descriptions of every invariant the program breaks."""
    violations: list[str] = []
    block_ids: set[str] = set()
    seen: dict[str, int] = {}
    for index, block in enumerate(program.blocks):
        if block.id in block_ids:
            violations.append(f"block id '{block.id}' is used by more than one block")
        block_ids.add(block.id)

        if len(set(block.question_ids)) != len(block.question_ids):
            violations.append(f"block '{block.id}' lists a question more than once")

        if block.is_repeated:
            scope = catalog.get(block.repeated_under)  # type: ignore[arg-type]
            if not isinstance(scope, EnumeratorQuestion):
                violations.append(
                    f"block '{block.id}' is repeated under '{block.repeated_under}' which is not an enumerator question"
                )

        for qid in block.question_ids:
            # Owners are tracked by position so blocks sharing an id still count twice
            owner = seen.get(qid)
            if owner is not None and owner != index:
                violations.append(
                    f"question '{qid}' appears in blocks '{program.blocks[owner].id}' and '{block.id}'"
                )
            seen.setdefault(qid, index)

            question = catalog.get(qid)
            if question is None:
                violations.append(f"block '{block.id}' references unknown question '{qid}'")
                continue
            if not block.is_repeated:
                if isinstance(question, RepeatedQuestion):
                    violations.append(f"repeated question '{qid}' is placed in top-level block '{block.id}'")
                if isinstance(question, EnumeratorQuestion) and len(block.question_ids) != 1:
                    violations.append(f"enumerator question '{qid}' shares block '{block.id}' with other questions")
            elif scope_of(question) != block.repeated_under:
                violations.append(
                    f"question '{qid}' is not scoped to enumerator '{block.repeated_under}' of block '{block.id}'"
                )
    return violations


def validate_structure(program: Program, catalog: QuestionCatalog) -> None:
    """Raise StructureInconsistency when the program breaks any invariant."""
    violations = find_violations(program, catalog)
    if violations:
        logger.error(
            "program_structure_inconsistent program_id=%s violations=%s",
            program.id,
            violations,
        )
        raise StructureInconsistency("; ".join(violations))


__all__ = ["find_violations", "validate_structure"]
