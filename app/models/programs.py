"""Pydantic request/response models for program, block and bank routes."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from app.logic.eligibility import block_state
from app.logic.program_structure import Block, Program
from app.logic.question_definitions import Question, QuestionCatalog

QUESTION_BANK_TITLE = "Question bank"


class ProgramCreate(BaseModel):
    admin_name: str = Field(min_length=1)
    admin_description: str = ""


class BlockCreate(BaseModel):
    name: Optional[str] = None
    description: str = ""


class RepeatedBlockCreate(BaseModel):
    enumerator_question_id: str = Field(min_length=1)


class BlockQuestionAdd(BaseModel):
    question_id: str = Field(min_length=1)


class BlockOut(BaseModel):
    block_id: str
    name: str
    description: str = ""
    repeated_under: Optional[str] = None
    question_ids: List[str]
    state: str


class ProgramOut(BaseModel):
    program_id: str
    admin_name: str
    admin_description: str = ""
    blocks: List[BlockOut]
    etag: str


class ProgramList(BaseModel):
    programs: List[ProgramOut]


class BankQuestion(BaseModel):
    question_id: str
    name: str
    kind: str


class QuestionBankOut(BaseModel):
    title: str = QUESTION_BANK_TITLE
    program_id: str
    block_id: str
    questions: List[BankQuestion]


def block_out(block: Block, catalog: QuestionCatalog) -> BlockOut:
    return BlockOut(
        block_id=block.id,
        name=block.name,
        description=block.description,
        repeated_under=block.repeated_under,
        question_ids=list(block.question_ids),
        state=block_state(block, catalog),
    )


def program_out(program: Program, catalog: QuestionCatalog, etag: str) -> ProgramOut:
    return ProgramOut(
        program_id=program.id,
        admin_name=program.admin_name,
        admin_description=program.admin_description,
        blocks=[block_out(b, catalog) for b in program.blocks],
        etag=etag,
    )


def bank_out(program: Program, block_id: str, questions: List[Question]) -> QuestionBankOut:
    return QuestionBankOut(
        program_id=program.id,
        block_id=block_id,
        questions=[BankQuestion(question_id=q.id, name=q.name, kind=q.kind) for q in questions],
    )


__all__ = [
    "QUESTION_BANK_TITLE",
    "ProgramCreate",
    "BlockCreate",
    "RepeatedBlockCreate",
    "BlockQuestionAdd",
    "BlockOut",
    "ProgramOut",
    "ProgramList",
    "BankQuestion",
    "QuestionBankOut",
    "block_out",
    "program_out",
    "bank_out",
]
