"""
FastAPI application entry point for the tracker service.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from tracker.config import get_settings
from tracker.errors import StorageFailure, Unauthenticated
from tracker.routes import router, session_router

logger = logging.getLogger(__name__)


async def _unauthenticated_handler(request: Request, exc: Unauthenticated):
    return JSONResponse(status_code=401, content={"error": "not_authenticated"})


async def _storage_failure_handler(request: Request, exc: StorageFailure):
    logger.error(
        "Storage failure on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(status_code=500, content={"error": "storage_failure"})


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title="Task Tracker Backend", version="0.1.0")
    app.add_middleware(
        SessionMiddleware, secret_key=settings.session_secret, same_site="lax"
    )
    app.add_exception_handler(Unauthenticated, _unauthenticated_handler)
    app.add_exception_handler(StorageFailure, _storage_failure_handler)
    app.include_router(router, prefix=settings.api_prefix)
    app.include_router(session_router)
    return app


app = create_app()
