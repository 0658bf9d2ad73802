"""QuestionKind enumeration for catalog question types.

Provides a simple constants container instead of an Enum to keep imports
lightweight in architectural tests. Every base kind has a repeated variant named
``repeated_<kind>`` except ``enumerator``.
"""

from __future__ import annotations


class QuestionKind:
    ADDRESS = "address"
    NAME = "name"
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    EMAIL = "email"
    ID = "id"
    CHECKBOX = "checkbox"
    DROPDOWN = "dropdown"
    RADIO_BUTTON = "radio_button"
    FILE_UPLOAD = "file_upload"
    ENUMERATOR = "enumerator"


REPEATED_PREFIX = "repeated_"

BASE_KINDS: tuple[str, ...] = (
    QuestionKind.ADDRESS,
    QuestionKind.NAME,
    QuestionKind.TEXT,
    QuestionKind.NUMBER,
    QuestionKind.DATE,
    QuestionKind.EMAIL,
    QuestionKind.ID,
    QuestionKind.CHECKBOX,
    QuestionKind.DROPDOWN,
    QuestionKind.RADIO_BUTTON,
    QuestionKind.FILE_UPLOAD,
)

REPEATED_KINDS: tuple[str, ...] = tuple(REPEATED_PREFIX + k for k in BASE_KINDS)

ALL_KINDS: frozenset[str] = frozenset(BASE_KINDS + REPEATED_KINDS + (QuestionKind.ENUMERATOR,))


def is_known_kind(kind: str) -> bool:
    return kind in ALL_KINDS


def is_repeated_kind(kind: str) -> bool:
    return kind in REPEATED_KINDS


__all__ = [
    "QuestionKind",
    "BASE_KINDS",
    "REPEATED_KINDS",
    "ALL_KINDS",
    "is_known_kind",
    "is_repeated_kind",
]
