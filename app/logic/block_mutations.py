"""Pure mutations over program snapshots.

Each function validates against the current snapshot and returns a new
``Program``; the input is never modified, so a rejected mutation leaves no
trace. Persisting the result is the caller's job (see program_service).
"""

from __future__ import annotations

import logging

from app.logic.eligibility import compute_bank
from app.logic.errors import DuplicateBlock, NotAnEnumerator, NotEligible, NotPresent, ProgramNeedsABlock
from app.logic.invariants import validate_structure
from app.logic.program_structure import Block, Program, next_block_name
from app.logic.question_definitions import EnumeratorQuestion, QuestionCatalog

logger = logging.getLogger(__name__)


def add_question_to_block(
    program: Program,
    catalog: QuestionCatalog,
    block_id: str,
    question_id: str,
) -> Program:
    """Append ``question_id`` to the block if it is in the block's bank right now."""
    bank = compute_bank(program, catalog, block_id)
    if question_id not in bank:
        logger.info(
            "add_question_rejected program_id=%s block_id=%s question_id=%s bank_size=%s",
            program.id,
            block_id,
            question_id,
            len(bank),
        )
        raise NotEligible(block_id, question_id)
    block = program.find_block(block_id)
    return program.with_block(block.with_questions(block.question_ids + (question_id,)))


def remove_question_from_block(
    program: Program,
    catalog: QuestionCatalog,
    block_id: str,
    question_id: str,
) -> Program:
    """Remove ``question_id`` from the block; it becomes eligible again everywhere it fits."""
    block = program.find_block(block_id)
    validate_structure(program, catalog)
    if question_id not in block.question_ids:
        raise NotPresent(block_id, question_id)
    return program.with_block(block.with_questions(q for q in block.question_ids if q != question_id))


def create_repeated_block(
    program: Program,
    catalog: QuestionCatalog,
    enumerator_question_id: str,
    block_id: str,
) -> Program:
    """Append an empty block repeated under an enumerator placed in the program."""
    catalog.validate()
    validate_structure(program, catalog)
    _require_new_block_id(program, block_id)
    question = catalog.get(enumerator_question_id)
    if question is None:
        raise NotAnEnumerator(f"question '{enumerator_question_id}' does not exist")
    if not isinstance(question, EnumeratorQuestion):
        raise NotAnEnumerator(f"question '{enumerator_question_id}' is a '{question.kind}' question")
    if program.block_containing(enumerator_question_id) is None:
        raise NotAnEnumerator(
            f"enumerator question '{enumerator_question_id}' is not placed in any block of program '{program.id}'"
        )
    block = Block(
        id=block_id,
        name=next_block_name(program, repeated=True),
        repeated_under=enumerator_question_id,
    )
    return program.with_appended_block(block)


def create_block(
    program: Program,
    catalog: QuestionCatalog,
    block_id: str,
    name: str | None = None,
    description: str = "",
) -> Program:
    """Append an empty top-level block."""
    validate_structure(program, catalog)
    _require_new_block_id(program, block_id)
    block = Block(id=block_id, name=name or next_block_name(program), description=description)
    return program.with_appended_block(block)


def delete_block(program: Program, catalog: QuestionCatalog, block_id: str) -> Program:
    """Drop a block and release every question it held."""
    program.find_block(block_id)
    validate_structure(program, catalog)
    if len(program.blocks) <= 1:
        raise ProgramNeedsABlock(f"program '{program.id}' must keep at least one block")
    return program.without_block(block_id)


def _require_new_block_id(program: Program, block_id: str) -> None:
    if program.has_block(block_id):
        raise DuplicateBlock(program.id, block_id)


__all__ = [
    "add_question_to_block",
    "remove_question_from_block",
    "create_repeated_block",
    "create_block",
    "delete_block",
]
