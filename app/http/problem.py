"""Problem+JSON utilities and global exception handlers.

Defines the RFC7807 media type and handler callables that produce
application/problem+json responses for domain, HTTP, validation and
unexpected errors.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.http.error_mapping import status_for
from app.logic.errors import InvalidQuestion, InvalidQuestionUpdate, ProgramEditorError

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def problem_for(exc: ProgramEditorError) -> Dict[str, Any]:
    """Build the problem+json body for a domain error."""
    status = status_for(exc.code)
    problem: Dict[str, Any] = {
        "title": exc.title,
        "status": status,
        "detail": exc.detail,
        "code": exc.code,
    }
    if isinstance(exc, (InvalidQuestion, InvalidQuestionUpdate)):
        problem["errors"] = list(exc.errors)
    return problem


async def handle_domain_error(request: Request, exc: ProgramEditorError) -> JSONResponse:  # noqa: D401
    problem = problem_for(exc)
    if problem["status"] >= 500:
        logger.error("domain_error code=%s path=%s detail=%s", exc.code, request.url.path, exc.detail)
    else:
        logger.info("domain_error code=%s path=%s", exc.code, request.url.path)
    return JSONResponse(problem, status_code=problem["status"], media_type=PROBLEM_MEDIA_TYPE)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    status = int(exc.status_code or 500)
    if isinstance(exc.detail, dict):
        detail = dict(exc.detail)
    else:
        detail = {"title": "Error", "status": status, "detail": str(exc.detail or "")}
    headers = {str(k): str(v) for k, v in (exc.headers or {}).items()}
    return JSONResponse(detail, status_code=status, media_type=PROBLEM_MEDIA_TYPE, headers=headers or None)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    problem = {
        "title": "Invalid Request",
        "status": 422,
        "detail": "Request validation failed",
        "errors": [
            {"loc": list(err.get("loc", ())), "msg": str(err.get("msg", "")), "type": str(err.get("type", ""))}
            for err in exc.errors()
        ],
    }
    return JSONResponse(problem, status_code=422, media_type=PROBLEM_MEDIA_TYPE)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return JSONResponse({"title": "Internal Server Error", "status": 500}, status_code=500, media_type=PROBLEM_MEDIA_TYPE)


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem_for",
    "handle_domain_error",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
