"""Immutable program structure snapshots.

A ``Program`` is an ordered tuple of ``Block`` values. Mutations never edit a
snapshot in place; they return a new ``Program`` built with ``replace``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from app.logic.errors import UnknownBlock


@dataclass(frozen=True)
class Block:
    id: str
    name: str
    repeated_under: Optional[str] = None
    question_ids: tuple[str, ...] = ()
    description: str = ""

    @property
    def is_repeated(self) -> bool:
        return self.repeated_under is not None

    def with_questions(self, question_ids: Iterable[str]) -> "Block":
        return replace(self, question_ids=tuple(question_ids))


@dataclass(frozen=True)
class Program:
    id: str
    admin_name: str
    admin_description: str = ""
    blocks: tuple[Block, ...] = field(default_factory=tuple)

    def find_block(self, block_id: str) -> Block:
        for block in self.blocks:
            if block.id == block_id:
                return block
        raise UnknownBlock(self.id, block_id)

    def has_block(self, block_id: str) -> bool:
        return any(b.id == block_id for b in self.blocks)

    def used_question_ids(self) -> frozenset[str]:
        """Every question id placed in any block of the program."""
        return frozenset(qid for block in self.blocks for qid in block.question_ids)

    def block_containing(self, question_id: str) -> Optional[Block]:
        for block in self.blocks:
            if question_id in block.question_ids:
                return block
        return None

    def with_block(self, updated: Block) -> "Program":
        """Return a copy where the block with ``updated.id`` is swapped in."""
        self.find_block(updated.id)
        return replace(
            self,
            blocks=tuple(updated if b.id == updated.id else b for b in self.blocks),
        )

    def with_appended_block(self, block: Block) -> "Program":
        return replace(self, blocks=self.blocks + (block,))

    def without_block(self, block_id: str) -> "Program":
        self.find_block(block_id)
        return replace(self, blocks=tuple(b for b in self.blocks if b.id != block_id))


_DEFAULT_NAME = re.compile(r"^Block (\d+)(?: \(repeated\))?$")


def next_block_name(program: Program, repeated: bool = False) -> str:
    """Return the display name for the next block appended to ``program``.

    The number is one past both the block count and the highest default
    ``Block N`` name in use, so default names never repeat after a delete.
    """
    highest = len(program.blocks)
    for block in program.blocks:
        match = _DEFAULT_NAME.match(block.name)
        if match:
            highest = max(highest, int(match.group(1)))
    name = f"Block {highest + 1}"
    return f"{name} (repeated)" if repeated else name


__all__ = ["Block", "Program", "next_block_name"]
