"""Question catalog endpoints.

Implements:
- POST /questions            create a question definition
- GET /questions             list the catalog in insertion order
- GET /questions/{id}        read one definition
- PATCH /questions/{id}      update text, help text and description
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from app.logic import events
from app.logic.repository_questions import create_question, get_question, list_questions, update_question
from app.models.questions import QuestionCreate, QuestionList, QuestionOut, QuestionUpdate

router = APIRouter(prefix="/questions")
logger = logging.getLogger(__name__)


@router.post(
    "",
    summary="Create a question definition",
    operation_id="createQuestion",
    status_code=201,
    response_model=QuestionOut,
)
def post_question(payload: QuestionCreate) -> QuestionOut:
    row = create_question(
        name=payload.name,
        kind=payload.kind,
        question_text=payload.question_text,
        help_text=payload.help_text,
        description=payload.description,
        enumerator_id=payload.enumerator_id,
    )
    events.publish(events.QUESTION_CREATED, {"question_id": row["question_id"], "kind": row["kind"]})
    return QuestionOut(**row)


@router.get("", summary="List question definitions", operation_id="listQuestions", response_model=QuestionList)
def get_questions() -> QuestionList:
    return QuestionList(questions=[QuestionOut(**row) for row in list_questions()])


@router.get(
    "/{question_id}",
    summary="Get a question definition",
    operation_id="getQuestion",
    response_model=QuestionOut,
)
def get_one_question(question_id: str) -> QuestionOut:
    return QuestionOut(**get_question(question_id))


@router.patch(
    "/{question_id}",
    summary="Update the mutable members of a question",
    operation_id="updateQuestion",
    response_model=QuestionOut,
)
def patch_question(question_id: str, payload: QuestionUpdate) -> QuestionOut:
    row = update_question(question_id, **payload.model_dump(exclude_unset=True))
    events.publish(events.QUESTION_UPDATED, {"question_id": question_id})
    return QuestionOut(**row)
