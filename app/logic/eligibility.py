"""Question bank eligibility engine.

``compute_bank`` returns the ids of the questions an operator may add to a
block right now. It is a pure function of the program snapshot and the
catalog snapshot and is recomputed on every call; nothing is cached.

Rules:
- a question placed in any block is in no bank anywhere in the program;
- a repeated block offers only repeated questions scoped to its enumerator;
- a top-level block never offers repeated questions;
- a top-level block holding an enumerator is sealed (empty bank);
- a non-empty top-level block no longer offers enumerator questions.
"""

from __future__ import annotations

import logging

from app.logic.invariants import validate_structure
from app.logic.program_structure import Block, Program
from app.logic.question_definitions import EnumeratorQuestion, QuestionCatalog, RepeatedQuestion, scope_of

logger = logging.getLogger(__name__)


class BlockState:
    EMPTY = "empty"
    NON_ENUMERATOR_POPULATED = "non_enumerator_populated"
    ENUMERATOR_SEALED = "enumerator_sealed"
    REPEATED_SCOPED = "repeated_scoped"


def block_state(block: Block, catalog: QuestionCatalog) -> str:
    """Classify a block into one of the BlockState values."""
    if block.is_repeated:
        return BlockState.REPEATED_SCOPED
    if not block.question_ids:
        return BlockState.EMPTY
    if _holds_enumerator(block, catalog):
        return BlockState.ENUMERATOR_SEALED
    return BlockState.NON_ENUMERATOR_POPULATED


def _holds_enumerator(block: Block, catalog: QuestionCatalog) -> bool:
    return any(isinstance(catalog.get(qid), EnumeratorQuestion) for qid in block.question_ids)


def compute_bank(program: Program, catalog: QuestionCatalog, block_id: str) -> frozenset[str]:
    """Return the set of question ids currently eligible for ``block_id``.

    Raises UnknownBlock when the block is not part of the program,
    CatalogInconsistency when a repeated question's scope does not resolve,
    and StructureInconsistency when the program already breaks an invariant.
    """
    target = program.find_block(block_id)
    catalog.validate()
    validate_structure(program, catalog)

    used = program.used_question_ids()

    if target.is_repeated:
        return frozenset(
            q.id for q in catalog.questions if scope_of(q) == target.repeated_under and q.id not in used
        )

    candidates = [q for q in catalog.questions if not isinstance(q, RepeatedQuestion) and q.id not in used]
    if _holds_enumerator(target, catalog):
        return frozenset()
    if target.question_ids:
        return frozenset(q.id for q in candidates if not isinstance(q, EnumeratorQuestion))
    return frozenset(q.id for q in candidates)


def is_eligible(program: Program, catalog: QuestionCatalog, block_id: str, question_id: str) -> bool:
    return question_id in compute_bank(program, catalog, block_id)


__all__ = ["BlockState", "block_state", "compute_bank", "is_eligible"]
