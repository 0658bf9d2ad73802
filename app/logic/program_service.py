"""Program editing service.

Glue between the HTTP adapter, the two repositories and the pure engine.
Every mutation runs under the program's writer lock:

1. load fresh catalog and program snapshots
2. check the caller's If-Match token, when given
3. apply the pure mutation (which re-validates eligibility)
4. persist the new snapshot in one transaction
5. publish a domain event

Reads take no lock and compute on the snapshot they loaded.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

from app.logic import block_mutations
from app.logic import events
from app.logic.eligibility import compute_bank
from app.logic.errors import PreconditionFailed
from app.logic.etag import compute_program_etag, etag_matches
from app.logic.program_locks import PROGRAM_LOCKS
from app.logic.program_structure import Block, Program
from app.logic.question_definitions import Question, QuestionCatalog
from app.logic.repository_programs import create_program, get_program, new_id, replace_structure
from app.logic.repository_questions import load_catalog

logger = logging.getLogger(__name__)


def new_program(admin_name: str, admin_description: str = "") -> Program:
    program = create_program(admin_name, admin_description)
    events.publish(events.PROGRAM_CREATED, {"program_id": program.id, "admin_name": program.admin_name})
    return program


def question_bank(program_id: str, block_id: str) -> Tuple[Program, QuestionCatalog, list[Question]]:
    """Return the program snapshot, its catalog and the bank ordered by catalog order."""
    program = get_program(program_id)
    catalog = load_catalog()
    bank = compute_bank(program, catalog, block_id)
    logger.info(
        "question_bank_computed program_id=%s block_id=%s size=%s catalog_size=%s",
        program_id,
        block_id,
        len(bank),
        len(catalog),
    )
    return program, catalog, catalog.ordered(bank)


def _mutate(
    program_id: str,
    if_match: Optional[str],
    apply: Callable[[Program, QuestionCatalog], Program],
) -> Program:
    with PROGRAM_LOCKS.writer(program_id):
        program = get_program(program_id)
        current = compute_program_etag(program)
        if not etag_matches(if_match, current):
            logger.info("program_if_match_mismatch program_id=%s if_match=%s current=%s", program_id, if_match, current)
            raise PreconditionFailed(f"If-Match does not match current program ETag {current}")
        catalog = load_catalog()
        updated = apply(program, catalog)
        return replace_structure(updated)


def add_question(program_id: str, block_id: str, question_id: str, if_match: Optional[str] = None) -> Program:
    stored = _mutate(
        program_id,
        if_match,
        lambda p, c: block_mutations.add_question_to_block(p, c, block_id, question_id),
    )
    events.publish(
        events.BLOCK_QUESTION_ADDED,
        {"program_id": program_id, "block_id": block_id, "question_id": question_id},
    )
    return stored


def remove_question(program_id: str, block_id: str, question_id: str, if_match: Optional[str] = None) -> Program:
    stored = _mutate(
        program_id,
        if_match,
        lambda p, c: block_mutations.remove_question_from_block(p, c, block_id, question_id),
    )
    events.publish(
        events.BLOCK_QUESTION_REMOVED,
        {"program_id": program_id, "block_id": block_id, "question_id": question_id},
    )
    return stored


def add_repeated_block(
    program_id: str,
    enumerator_question_id: str,
    if_match: Optional[str] = None,
) -> Tuple[Program, Block]:
    block_id = new_id()
    stored = _mutate(
        program_id,
        if_match,
        lambda p, c: block_mutations.create_repeated_block(p, c, enumerator_question_id, block_id),
    )
    events.publish(
        events.REPEATED_BLOCK_CREATED,
        {"program_id": program_id, "block_id": block_id, "repeated_under": enumerator_question_id},
    )
    return stored, stored.find_block(block_id)


def add_block(
    program_id: str,
    name: Optional[str] = None,
    description: str = "",
    if_match: Optional[str] = None,
) -> Tuple[Program, Block]:
    block_id = new_id()
    stored = _mutate(
        program_id,
        if_match,
        lambda p, c: block_mutations.create_block(p, c, block_id, name=name, description=description),
    )
    events.publish(events.BLOCK_CREATED, {"program_id": program_id, "block_id": block_id})
    return stored, stored.find_block(block_id)


def remove_block(program_id: str, block_id: str, if_match: Optional[str] = None) -> Program:
    stored = _mutate(program_id, if_match, lambda p, c: block_mutations.delete_block(p, c, block_id))
    events.publish(events.BLOCK_DELETED, {"program_id": program_id, "block_id": block_id})
    return stored


__all__ = [
    "new_program",
    "question_bank",
    "add_question",
    "remove_question",
    "add_repeated_block",
    "add_block",
    "remove_block",
]
