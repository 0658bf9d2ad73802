from __future__ import annotations

import logging
from typing import Callable

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError

from app.config import load_config
from app.db.base import get_engine
from app.db.migrations_runner import apply_migrations
from app.http.problem import (
    handle_domain_error,
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from app.http.request_id import RequestIdMiddleware
from app.logging_setup import configure_logging
from app.logic.errors import ProgramEditorError
from app.routes import api_router

logger = logging.getLogger(__name__)


def _health_check() -> Callable[[], dict]:
    def check() -> dict:
        try:
            with get_engine().connect() as conn:
                conn.execute(sql_text("SELECT 1")).fetchone()
            return {"status": "ok", "db": True}
        except SQLAlchemyError as e:
            logger.error("Health DB check failed", exc_info=True)
            return {"status": "degraded", "db": False, "reason": str(e)}

    return check


def create_app() -> FastAPI:
    """Build the FastAPI application.

    Configures logging, applies pending SQL migrations when enabled, installs
    problem+json exception handlers and mounts the API under /api/v1.
    """
    config = load_config()
    configure_logging(config.logging.level)

    if config.database.auto_apply_migrations:
        applied = apply_migrations(get_engine(config.database.dsn), migrations_dir=config.database.migrations_dir)
        logger.info("startup_migrations applied=%s", applied)

    app = FastAPI(title="Program Question Bank Service", version="0.1.0")

    app.add_exception_handler(ProgramEditorError, handle_domain_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.add_middleware(RequestIdMiddleware)

    health = _health_check()

    @app.get("/health", tags=["Health"])
    def get_health() -> dict:
        return health()

    app.include_router(api_router, prefix="/api/v1")
    return app
