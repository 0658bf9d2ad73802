"""Program, block and question bank endpoints.

Every response that describes a program emits a Program-ETag header. Write
routes accept an optional If-Match carrying that tag; a stale tag is
rejected with 412 before anything changes.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Header, Response

from app.logic import program_service
from app.logic.etag import compute_program_etag
from app.logic.header_emitter import emit_etag_headers
from app.logic.program_structure import Program
from app.logic.repository_programs import get_program, list_programs
from app.logic.repository_questions import load_catalog
from app.models.programs import (
    BlockCreate,
    BlockOut,
    BlockQuestionAdd,
    ProgramCreate,
    ProgramList,
    ProgramOut,
    QuestionBankOut,
    RepeatedBlockCreate,
    bank_out,
    block_out,
    program_out,
)

router = APIRouter(prefix="/programs")
logger = logging.getLogger(__name__)


def _render(program: Program, response: Response) -> ProgramOut:
    etag = compute_program_etag(program)
    emit_etag_headers(response, scope="program", token=etag)
    return program_out(program, load_catalog(), etag)


@router.post("", summary="Create a program", operation_id="createProgram", status_code=201, response_model=ProgramOut)
def post_program(payload: ProgramCreate, response: Response) -> ProgramOut:
    program = program_service.new_program(payload.admin_name, payload.admin_description)
    return _render(program, response)


@router.get("", summary="List programs", operation_id="listPrograms", response_model=ProgramList)
def get_programs() -> ProgramList:
    catalog = load_catalog()
    return ProgramList(
        programs=[program_out(p, catalog, compute_program_etag(p)) for p in list_programs()]
    )


@router.get("/{program_id}", summary="Get a program with its blocks", operation_id="getProgram", response_model=ProgramOut)
def get_one_program(program_id: str, response: Response) -> ProgramOut:
    return _render(get_program(program_id), response)


@router.post(
    "/{program_id}/blocks",
    summary="Append an empty top-level block",
    operation_id="createBlock",
    status_code=201,
    response_model=BlockOut,
)
def post_block(
    program_id: str,
    payload: BlockCreate,
    response: Response,
    if_match: Optional[str] = Header(default=None),
) -> BlockOut:
    program, block = program_service.add_block(program_id, payload.name, payload.description, if_match=if_match)
    emit_etag_headers(response, scope="program", token=compute_program_etag(program))
    return block_out(block, load_catalog())


@router.post(
    "/{program_id}/blocks/repeated",
    summary="Create a block repeated under an enumerator question",
    operation_id="createRepeatedBlock",
    status_code=201,
    response_model=BlockOut,
)
def post_repeated_block(
    program_id: str,
    payload: RepeatedBlockCreate,
    response: Response,
    if_match: Optional[str] = Header(default=None),
) -> BlockOut:
    program, block = program_service.add_repeated_block(program_id, payload.enumerator_question_id, if_match=if_match)
    emit_etag_headers(response, scope="program", token=compute_program_etag(program))
    return block_out(block, load_catalog())


@router.delete(
    "/{program_id}/blocks/{block_id}",
    summary="Delete a block",
    operation_id="deleteBlock",
    response_model=ProgramOut,
)
def delete_block(
    program_id: str,
    block_id: str,
    response: Response,
    if_match: Optional[str] = Header(default=None),
) -> ProgramOut:
    return _render(program_service.remove_block(program_id, block_id, if_match=if_match), response)


@router.get(
    "/{program_id}/blocks/{block_id}/question-bank",
    summary="Questions currently eligible for a block",
    operation_id="getQuestionBank",
    response_model=QuestionBankOut,
)
def get_question_bank(program_id: str, block_id: str, response: Response) -> QuestionBankOut:
    program, _catalog, questions = program_service.question_bank(program_id, block_id)
    emit_etag_headers(response, scope="program", token=compute_program_etag(program))
    return bank_out(program, block_id, questions)


@router.post(
    "/{program_id}/blocks/{block_id}/questions",
    summary="Add a question from the bank to a block",
    operation_id="addBlockQuestion",
    response_model=ProgramOut,
)
def post_block_question(
    program_id: str,
    block_id: str,
    payload: BlockQuestionAdd,
    response: Response,
    if_match: Optional[str] = Header(default=None),
) -> ProgramOut:
    program = program_service.add_question(program_id, block_id, payload.question_id, if_match=if_match)
    return _render(program, response)


@router.delete(
    "/{program_id}/blocks/{block_id}/questions/{question_id}",
    summary="Remove a question from a block",
    operation_id="removeBlockQuestion",
    response_model=ProgramOut,
)
def delete_block_question(
    program_id: str,
    block_id: str,
    question_id: str,
    response: Response,
    if_match: Optional[str] = Header(default=None),
) -> ProgramOut:
    program = program_service.remove_question(program_id, block_id, question_id, if_match=if_match)
    return _render(program, response)
