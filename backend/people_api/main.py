"""
People API — FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires settings, the repository, middleware, exception
       handlers and routers, and returns the app.
Who:   uvicorn (people_api.main:app) and the test suite (create_app(repository=...)).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:   [Request ID] → [Access Log]          │
    │                                                     │
    │  Routes:                                            │
    │    GET /people?t=   GET /people/count               │
    │    GET /people/{id} POST /people     GET /health    │
    │                                                     │
    │  app.state.repository ← one PeopleRepository        │
    │                                                     │
    │  Exception Handlers:                                │
    │    ValidationError → 400   NotFoundError → 404      │
    │    ConflictError → 422     body schema → 422        │
    │    StoreUnavailableError → 500                      │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, log the chosen storage backend.
    Shutdown: close the repository (disposes the connection pool).
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from people_api import __version__
from people_api.config import Settings, settings as default_settings
from people_api.exceptions import (
    ConflictError,
    NotFoundError,
    PeopleApiError,
    StoreUnavailableError,
    ValidationError,
)
from people_api.middleware.logging import RequestLoggingMiddleware
from people_api.middleware.request_id import RequestIDMiddleware, request_id_var
from people_api.repositories import PeopleRepository, build_repository
from people_api.routes import health, people

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure the root logger once at startup.

    Format: 2026-01-15T12:00:00 [INFO] people_api.routes.people: Created person ...
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # uvicorn's own access log duplicates RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings
    repository: PeopleRepository = app.state.repository

    setup_logging(app_settings.log_level)
    logger.info("People API %s starting (storage=%s)", __version__, repository.backend_name)
    logger.info("Listening on http://%s:%d", app_settings.host, app_settings.port)

    yield

    logger.info("People API shutting down...")
    await repository.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "") or request_id_var.get("")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map error kinds to HTTP status codes.

        RequestValidationError  → 422 for the body, 400 for path/query
        ValidationError         → 400
        NotFoundError           → 404
        ConflictError           → 422
        StoreUnavailableError   → 500 (generic message, details logged)
        PeopleApiError (base)   → 500
        Exception (fallback)    → 500

    Response bodies never contain stack traces, SQL, or driver messages.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = _request_id(request)
        errors = exc.errors()
        in_body = any(err.get("loc", ("",))[0] == "body" for err in errors)
        status_code = 422 if in_body else 400
        logger.info("[%s] Request rejected (%d): %d error(s)", rid, status_code, len(errors))
        return JSONResponse(
            status_code=status_code,
            content={
                "error": "validation_error",
                "message": "The request is invalid",
                "details": [
                    {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
                    for err in errors
                ],
                "request_id": rid,
            },
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = _request_id(request)
        logger.info("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": _request_id(request),
            },
        )

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return JSONResponse(
            status_code=422,
            content={
                "error": "conflict",
                "message": exc.message,
                "details": {"field": exc.field},
                "request_id": _request_id(request),
            },
        )

    @app.exception_handler(StoreUnavailableError)
    async def handle_store_unavailable(request: Request, exc: StoreUnavailableError):
        rid = _request_id(request)
        logger.error("[%s] Store unavailable: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(PeopleApiError)
    async def handle_app_error(request: Request, exc: PeopleApiError):
        rid = _request_id(request)
        logger.error("[%s] Unhandled application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[PeopleRepository] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings:   Defaults to the environment-loaded singleton.
        repository: Defaults to build_repository(settings). Tests pass a
                    test double or an InMemoryPeopleRepository here.
    """
    app_settings = settings or default_settings

    app = FastAPI(
        title="People API",
        description="Create, fetch, search and count person records.",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.repository = repository if repository is not None else build_repository(app_settings)

    # Last added runs first: RequestID wraps Logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(people.router)
    app.include_router(health.router)

    return app


app = create_app()
