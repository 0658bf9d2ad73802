"""Typed failures raised by the catalog, the program store and the engine.

All are user-correctable precondition failures. Each carries a stable
``code`` token; HTTP status mapping lives in ``app.http.error_mapping``.
"""

from __future__ import annotations


class ProgramEditorError(Exception):
    """Base class for domain failures surfaced to adapters."""

    code = "PROGRAM_EDITOR_ERROR"
    title = "Program editor error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class UnknownBlock(ProgramEditorError):
    code = "UNKNOWN_BLOCK"
    title = "Unknown block"

    def __init__(self, program_id: str, block_id: str) -> None:
        super().__init__(f"block '{block_id}' does not exist in program '{program_id}'")
        self.program_id = program_id
        self.block_id = block_id


class NotEligible(ProgramEditorError):
    code = "NOT_ELIGIBLE"
    title = "Question not eligible"

    def __init__(self, block_id: str, question_id: str) -> None:
        super().__init__(f"question '{question_id}' is not in the question bank of block '{block_id}'")
        self.block_id = block_id
        self.question_id = question_id


class NotPresent(ProgramEditorError):
    code = "NOT_PRESENT"
    title = "Question not present"

    def __init__(self, block_id: str, question_id: str) -> None:
        super().__init__(f"question '{question_id}' is not in block '{block_id}'")
        self.block_id = block_id
        self.question_id = question_id


class DuplicateBlock(ProgramEditorError):
    code = "DUPLICATE_BLOCK"
    title = "Duplicate block"

    def __init__(self, program_id: str, block_id: str) -> None:
        super().__init__(f"block '{block_id}' already exists in program '{program_id}'")
        self.program_id = program_id
        self.block_id = block_id


class NotAnEnumerator(ProgramEditorError):
    code = "NOT_AN_ENUMERATOR"
    title = "Not an enumerator"


class CatalogInconsistency(ProgramEditorError):
    code = "CATALOG_INCONSISTENCY"
    title = "Catalog inconsistency"


class StructureInconsistency(ProgramEditorError):
    code = "STRUCTURE_INCONSISTENCY"
    title = "Program structure inconsistency"


class UnknownProgram(ProgramEditorError):
    code = "UNKNOWN_PROGRAM"
    title = "Unknown program"

    def __init__(self, program_id: str) -> None:
        super().__init__(f"program '{program_id}' does not exist")
        self.program_id = program_id


class ProgramConflict(ProgramEditorError):
    code = "PROGRAM_CONFLICT"
    title = "Program conflict"


class ProgramNeedsABlock(ProgramEditorError):
    code = "PROGRAM_NEEDS_A_BLOCK"
    title = "Program needs a block"


class QuestionNotFound(ProgramEditorError):
    code = "QUESTION_NOT_FOUND"
    title = "Question not found"

    def __init__(self, question_id: str) -> None:
        super().__init__(f"question '{question_id}' not found")
        self.question_id = question_id


class InvalidQuestion(ProgramEditorError):
    code = "INVALID_QUESTION"
    title = "Invalid question"

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class QuestionConflict(ProgramEditorError):
    code = "QUESTION_CONFLICT"
    title = "Question conflict"


class InvalidQuestionUpdate(ProgramEditorError):
    code = "INVALID_QUESTION_UPDATE"
    title = "Invalid question update"

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class PreconditionFailed(ProgramEditorError):
    code = "PRE_IF_MATCH_ETAG_MISMATCH"
    title = "Precondition Failed"


__all__ = [
    "ProgramEditorError",
    "UnknownBlock",
    "NotEligible",
    "NotPresent",
    "DuplicateBlock",
    "NotAnEnumerator",
    "CatalogInconsistency",
    "StructureInconsistency",
    "UnknownProgram",
    "ProgramConflict",
    "ProgramNeedsABlock",
    "QuestionNotFound",
    "InvalidQuestion",
    "QuestionConflict",
    "InvalidQuestionUpdate",
    "PreconditionFailed",
]
