"""Functional tests for the question bank eligibility engine.

Covers the bank rules for empty, populated, enumerator-sealed and repeated
blocks, the admin walkthrough scenarios, and the failure modes of
compute_bank. All tests run on in-memory snapshots; no database access.
"""

from __future__ import annotations

import pytest

from app.logic.block_mutations import add_question_to_block, create_repeated_block, remove_question_from_block
from app.logic.eligibility import BlockState, block_state, compute_bank, is_eligible
from app.logic.errors import CatalogInconsistency, NotAnEnumerator, NotEligible, StructureInconsistency, UnknownBlock
from app.logic.program_structure import Block, Program
from app.logic.question_definitions import EnumeratorQuestion, QuestionCatalog, RepeatedQuestion, SimpleQuestion


def _program(*blocks: Block) -> Program:
    return Program(id="prog-1", admin_name="apc program", blocks=tuple(blocks))


def test_empty_top_level_block_offers_every_non_repeated_question(catalog):
    program = _program(Block(id="b1", name="Block 1"))
    assert compute_bank(program, catalog, "b1") == {"apc-address", "apc-name", "apc-text", "apc-enumerator"}


def test_populated_block_drops_enumerators_and_used_questions(catalog):
    program = _program(Block(id="b1", name="Block 1", question_ids=("apc-name",)))
    assert compute_bank(program, catalog, "b1") == {"apc-address", "apc-text"}


def test_enumerator_block_is_sealed(catalog):
    program = _program(Block(id="b1", name="Block 1", question_ids=("apc-enumerator",)))
    assert compute_bank(program, catalog, "b1") == frozenset()


def test_repeated_block_offers_only_questions_scoped_to_its_enumerator(catalog):
    program = _program(
        Block(id="b1", name="Block 1", question_ids=("apc-enumerator",)),
        Block(id="r1", name="Block 2 (repeated)", repeated_under="apc-enumerator"),
    )
    assert compute_bank(program, catalog, "r1") == {"apc-repeated"}


def test_repeated_block_ignores_questions_of_other_enumerators():
    catalog = QuestionCatalog(
        [
            EnumeratorQuestion(id="household", name="household"),
            EnumeratorQuestion(id="jobs", name="jobs"),
            RepeatedQuestion(id="member-name", name="member-name", kind="repeated_name", scope_enumerator_id="household"),
            RepeatedQuestion(id="employer", name="employer", kind="repeated_text", scope_enumerator_id="jobs"),
            SimpleQuestion(id="address", name="address", kind="address"),
        ]
    )
    program = _program(
        Block(id="b1", name="Block 1", question_ids=("household",)),
        Block(id="b2", name="Block 2", question_ids=("jobs",)),
        Block(id="r1", name="Block 3 (repeated)", repeated_under="household"),
    )
    assert compute_bank(program, catalog, "r1") == {"member-name"}


def test_question_used_in_another_block_is_not_offered(catalog):
    program = _program(
        Block(id="b1", name="Block 1", question_ids=("apc-address",)),
        Block(id="b2", name="Block 2"),
    )
    bank = compute_bank(program, catalog, "b2")
    assert "apc-address" not in bank
    assert bank == {"apc-name", "apc-text", "apc-enumerator"}


def test_repeated_question_used_in_one_repeated_block_is_not_offered_in_another(catalog):
    program = _program(
        Block(id="b1", name="Block 1", question_ids=("apc-enumerator",)),
        Block(id="r1", name="Block 2 (repeated)", repeated_under="apc-enumerator", question_ids=("apc-repeated",)),
        Block(id="r2", name="Block 3 (repeated)", repeated_under="apc-enumerator"),
    )
    assert compute_bank(program, catalog, "r2") == frozenset()


def test_unknown_block_fails(catalog):
    with pytest.raises(UnknownBlock) as info:
        compute_bank(_program(Block(id="b1", name="Block 1")), catalog, "missing")
    assert info.value.code == "UNKNOWN_BLOCK"


def test_unresolvable_repeated_scope_is_surfaced():
    catalog = QuestionCatalog(
        [
            SimpleQuestion(id="q1", name="q1", kind="text"),
            RepeatedQuestion(id="orphan", name="orphan", kind="repeated_text", scope_enumerator_id="gone"),
        ]
    )
    with pytest.raises(CatalogInconsistency):
        compute_bank(_program(Block(id="b1", name="Block 1")), catalog, "b1")


def test_repeated_scope_pointing_at_non_enumerator_is_surfaced():
    catalog = QuestionCatalog(
        [
            SimpleQuestion(id="q1", name="q1", kind="text"),
            RepeatedQuestion(id="bad", name="bad", kind="repeated_text", scope_enumerator_id="q1"),
        ]
    )
    with pytest.raises(CatalogInconsistency):
        compute_bank(_program(Block(id="b1", name="Block 1")), catalog, "b1")


def test_program_breaking_cross_block_uniqueness_is_surfaced(catalog):
    program = _program(
        Block(id="b1", name="Block 1", question_ids=("apc-name",)),
        Block(id="b2", name="Block 2", question_ids=("apc-name",)),
    )
    with pytest.raises(StructureInconsistency):
        compute_bank(program, catalog, "b1")


def test_recomputation_is_idempotent(catalog):
    program = _program(Block(id="b1", name="Block 1", question_ids=("apc-text",)), Block(id="b2", name="Block 2"))
    assert compute_bank(program, catalog, "b2") == compute_bank(program, catalog, "b2")


def test_removal_never_narrows_another_blocks_bank(catalog):
    program = _program(
        Block(id="b1", name="Block 1", question_ids=("apc-name", "apc-text")),
        Block(id="b2", name="Block 2", question_ids=("apc-address",)),
        Block(id="b3", name="Block 3"),
    )
    before = {b.id: compute_bank(program, catalog, b.id) for b in program.blocks if b.id != "b1"}
    after_program = remove_question_from_block(program, catalog, "b1", "apc-name")
    for block_id, bank in before.items():
        assert bank <= compute_bank(after_program, catalog, block_id)


def test_block_states_follow_contents(catalog):
    assert block_state(Block(id="b", name="B"), catalog) == BlockState.EMPTY
    assert block_state(Block(id="b", name="B", question_ids=("apc-name",)), catalog) == BlockState.NON_ENUMERATOR_POPULATED
    assert block_state(Block(id="b", name="B", question_ids=("apc-enumerator",)), catalog) == BlockState.ENUMERATOR_SEALED
    assert block_state(Block(id="r", name="R", repeated_under="apc-enumerator"), catalog) == BlockState.REPEATED_SCOPED


def test_admin_walkthrough_with_enumerator_and_repeated_questions(catalog):
    program = _program(Block(id="b1", name="Block 1"))

    # Empty block: every non-repeated question, repeated ones never
    assert compute_bank(program, catalog, "b1") == {"apc-address", "apc-name", "apc-text", "apc-enumerator"}

    # Adding a non-enumerator question takes enumerators out of the bank
    program = add_question_to_block(program, catalog, "b1", "apc-name")
    assert compute_bank(program, catalog, "b1") == {"apc-address", "apc-text"}

    # Swap the name for the enumerator; the block is sealed
    program = remove_question_from_block(program, catalog, "b1", "apc-name")
    program = add_question_to_block(program, catalog, "b1", "apc-enumerator")
    assert compute_bank(program, catalog, "b1") == frozenset()

    # With the enumerator removed it cannot seed a repeated block
    program = remove_question_from_block(program, catalog, "b1", "apc-enumerator")
    assert program.find_block("b1").question_ids == ()
    with pytest.raises(NotAnEnumerator):
        create_repeated_block(program, catalog, "apc-enumerator", "r1")

    # Re-adding it makes the repeated block possible
    program = add_question_to_block(program, catalog, "b1", "apc-enumerator")
    program = create_repeated_block(program, catalog, "apc-enumerator", "r1")
    repeated = program.find_block("r1")
    assert repeated.repeated_under == "apc-enumerator"
    assert compute_bank(program, catalog, "r1") == {"apc-repeated"}

    # A question outside the enumerator's scope is refused in the repeated block
    with pytest.raises(NotEligible):
        add_question_to_block(program, catalog, "r1", "apc-address")
    assert not is_eligible(program, catalog, "r1", "apc-address")
