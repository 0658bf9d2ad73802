"""Program structure repository.

Loads programs as immutable ``Program`` snapshots and persists whole
snapshots back in a single transaction, so a mutation is either fully stored
or not stored at all.
"""

from __future__ import annotations

import logging
import uuid
from typing import Dict, List

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection

from app.db.base import get_engine
from app.logic.errors import ProgramConflict, UnknownProgram
from app.logic.program_structure import Block, Program, next_block_name

logger = logging.getLogger(__name__)


def new_id() -> str:
    return str(uuid.uuid4())


def _load(conn: Connection, program_id: str) -> Program:
    row = conn.execute(
        sql_text("SELECT program_id, admin_name, admin_description FROM programs WHERE program_id = :pid"),
        {"pid": str(program_id)},
    ).fetchone()
    if not row:
        raise UnknownProgram(str(program_id))

    block_rows = conn.execute(
        sql_text(
            "SELECT block_id, name, description, repeated_under FROM blocks "
            "WHERE program_id = :pid ORDER BY block_order ASC"
        ),
        {"pid": str(program_id)},
    ).fetchall()
    question_rows = conn.execute(
        sql_text(
            "SELECT block_id, question_id FROM block_questions "
            "WHERE program_id = :pid ORDER BY block_id ASC, position ASC"
        ),
        {"pid": str(program_id)},
    ).fetchall()
    by_block: Dict[str, List[str]] = {}
    for block_id, question_id in question_rows:
        by_block.setdefault(str(block_id), []).append(str(question_id))

    blocks = tuple(
        Block(
            id=str(b[0]),
            name=str(b[1]),
            description=str(b[2] or ""),
            repeated_under=str(b[3]) if b[3] is not None else None,
            question_ids=tuple(by_block.get(str(b[0]), [])),
        )
        for b in block_rows
    )
    return Program(id=str(row[0]), admin_name=str(row[1]), admin_description=str(row[2] or ""), blocks=blocks)


def create_program(admin_name: str, admin_description: str = "") -> Program:
    """Create a program with one empty top-level block.

    Raises ProgramConflict when the admin name is blank or already used.
    """
    admin_name = (admin_name or "").strip()
    if not admin_name:
        raise ProgramConflict("program admin name must not be blank")
    eng = get_engine()
    program_id = new_id()
    with eng.begin() as conn:
        existing = conn.execute(
            sql_text("SELECT program_id FROM programs WHERE admin_name = :n"),
            {"n": admin_name},
        ).fetchone()
        if existing:
            raise ProgramConflict(f"program '{admin_name}' already exists with id: {existing[0]}")
        next_seq = conn.execute(sql_text("SELECT COALESCE(MAX(seq), 0) + 1 FROM programs")).scalar_one()
        conn.execute(
            sql_text(
                "INSERT INTO programs (program_id, seq, admin_name, admin_description) VALUES (:pid, :seq, :n, :d)"
            ),
            {"pid": program_id, "seq": int(next_seq), "n": admin_name, "d": admin_description or ""},
        )
        first = Block(id=new_id(), name=next_block_name(Program(id=program_id, admin_name=admin_name)))
        _insert_block(conn, program_id, first, 1)
        program = _load(conn, program_id)
    logger.info("program_created program_id=%s admin_name=%s", program_id, admin_name)
    return program


def get_program(program_id: str) -> Program:
    eng = get_engine()
    with eng.connect() as conn:
        return _load(conn, program_id)


def list_programs() -> List[Program]:
    eng = get_engine()
    with eng.connect() as conn:
        ids = [str(r[0]) for r in conn.execute(sql_text("SELECT program_id FROM programs ORDER BY seq ASC"))]
        return [_load(conn, pid) for pid in ids]


def _insert_block(conn: Connection, program_id: str, block: Block, order: int) -> None:
    conn.execute(
        sql_text(
            "INSERT INTO blocks (block_id, program_id, block_order, name, description, repeated_under) "
            "VALUES (:bid, :pid, :ord, :name, :d, :ru)"
        ),
        {
            "bid": block.id,
            "pid": program_id,
            "ord": int(order),
            "name": block.name,
            "d": block.description,
            "ru": block.repeated_under,
        },
    )


def replace_structure(program: Program) -> Program:
    """Persist the full block structure of ``program`` and return the stored snapshot.

    Block questions are rewritten first-delete-then-insert so the per-program
    uniqueness constraint only ever sees the final placement.
    """
    eng = get_engine()
    with eng.begin() as conn:
        _load(conn, program.id)
        conn.execute(sql_text("DELETE FROM block_questions WHERE program_id = :pid"), {"pid": program.id})
        stored_ids = {
            str(r[0])
            for r in conn.execute(
                sql_text("SELECT block_id FROM blocks WHERE program_id = :pid"),
                {"pid": program.id},
            )
        }
        wanted_ids = {b.id for b in program.blocks}
        for stale in stored_ids - wanted_ids:
            conn.execute(sql_text("DELETE FROM blocks WHERE block_id = :bid"), {"bid": stale})
        for order, block in enumerate(program.blocks, start=1):
            if block.id in stored_ids:
                conn.execute(
                    sql_text(
                        "UPDATE blocks SET block_order = :ord, name = :name, description = :d, repeated_under = :ru "
                        "WHERE block_id = :bid"
                    ),
                    {
                        "ord": order,
                        "name": block.name,
                        "d": block.description,
                        "ru": block.repeated_under,
                        "bid": block.id,
                    },
                )
            else:
                _insert_block(conn, program.id, block, order)
            for position, question_id in enumerate(block.question_ids, start=1):
                conn.execute(
                    sql_text(
                        "INSERT INTO block_questions (program_id, block_id, question_id, position) "
                        "VALUES (:pid, :bid, :qid, :pos)"
                    ),
                    {"pid": program.id, "bid": block.id, "qid": question_id, "pos": position},
                )
        stored = _load(conn, program.id)
    logger.info("program_structure_saved program_id=%s blocks=%s", program.id, len(stored.blocks))
    return stored


__all__ = [
    "new_id",
    "create_program",
    "get_program",
    "list_programs",
    "replace_structure",
]
