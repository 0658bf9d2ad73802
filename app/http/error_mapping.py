"""Central error mapping for domain failures.

Single source of truth for mapping domain error codes to HTTP statuses.
Handlers import from here instead of hardcoding numbers.
"""

from __future__ import annotations

ERROR_MAP = {
    "UNKNOWN_PROGRAM": {"status": 404},
    "UNKNOWN_BLOCK": {"status": 404},
    "QUESTION_NOT_FOUND": {"status": 404},
    "NOT_ELIGIBLE": {"status": 409},
    "NOT_PRESENT": {"status": 409},
    "NOT_AN_ENUMERATOR": {"status": 409},
    "PROGRAM_CONFLICT": {"status": 409},
    "PROGRAM_NEEDS_A_BLOCK": {"status": 409},
    "DUPLICATE_BLOCK": {"status": 409},
    "QUESTION_CONFLICT": {"status": 409},
    "INVALID_QUESTION": {"status": 422},
    "INVALID_QUESTION_UPDATE": {"status": 422},
    "PRE_IF_MATCH_ETAG_MISMATCH": {"status": 412},
    "CATALOG_INCONSISTENCY": {"status": 500},
    "STRUCTURE_INCONSISTENCY": {"status": 500},
}

DEFAULT_STATUS = 400


def status_for(code: str) -> int:
    return int(ERROR_MAP.get(code, {}).get("status", DEFAULT_STATUS))


__all__ = ["ERROR_MAP", "DEFAULT_STATUS", "status_for"]
