"""ETag computation helpers for program structure.

A program ETag fingerprints the block order, each block's repeated scope and
its ordered question ids. Any committed mutation changes it.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Optional

from app.logic.program_structure import Program

logger = logging.getLogger(__name__)


def compute_program_etag(program: Program) -> str:
    """Compute a weak ETag for a program's structure.

    Token shape: "{program_id}" then one "|{block_id}:{repeated_under}:{q1,q2}"
    segment per block in order -> SHA1 -> W/"…".
    """
    parts = [program.id]
    for block in program.blocks:
        parts.append(f"{block.id}:{block.repeated_under or ''}:{','.join(block.question_ids)}")
    token = "|".join(parts).encode("utf-8")
    return f'W/"{hashlib.sha1(token).hexdigest()}"'


def normalize_etag(value: Optional[str]) -> str:
    """Strip weak prefix and quotes so W/"x", "x" and x compare equal."""
    s = str(value or "").strip()
    if s.upper().startswith("W/"):
        s = s[2:].strip()
    return s.strip('"')


def etag_matches(if_match: Optional[str], current: str) -> bool:
    """Return True when any token in an If-Match header matches ``current`` or is '*'."""
    if if_match is None:
        return True
    candidates = [t.strip() for t in str(if_match).split(",") if t.strip()]
    want = normalize_etag(current)
    return any(c == "*" or normalize_etag(c) == want for c in candidates)


__all__ = ["compute_program_etag", "normalize_etag", "etag_matches"]
