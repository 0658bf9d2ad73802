"""Pydantic request/response models for the question catalog routes."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class QuestionCreate(BaseModel):
    name: str = Field(min_length=1)
    kind: str
    question_text: str = ""
    help_text: str = ""
    description: str = ""
    enumerator_id: Optional[str] = None


class QuestionUpdate(BaseModel):
    # Immutable members may be echoed back unchanged
    name: Optional[str] = None
    kind: Optional[str] = None
    enumerator_id: Optional[str] = None
    question_text: Optional[str] = None
    help_text: Optional[str] = None
    description: Optional[str] = None


class QuestionOut(BaseModel):
    question_id: str
    name: str
    kind: str
    question_text: str = ""
    help_text: str = ""
    description: str = ""
    enumerator_id: Optional[str] = None


class QuestionList(BaseModel):
    questions: List[QuestionOut]


__all__ = ["QuestionCreate", "QuestionUpdate", "QuestionOut", "QuestionList"]
