"""APIRouter registration for the program question bank service."""

from __future__ import annotations

from fastapi import APIRouter

from app.routes.programs import router as programs_router
from app.routes.questions import router as questions_router

api_router = APIRouter()
api_router.include_router(questions_router, tags=["Questions"])
api_router.include_router(programs_router, tags=["Programs", "QuestionBank"])

__all__ = ["api_router"]
