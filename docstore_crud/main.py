"""
DocStore CRUD — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn docstore_crud.main:app) or `python -m docstore_crud`.
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌─────────────┐ ┌──────────────┐  │
    │  │   Req ID     │→│  Logging    │→│    CORS      │  │
    │  └──────────────┘ └─────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes (one CRUD router per enabled resource):     │
    │  ┌──────────────┐ ┌─────────────┐ ┌──────────────┐  │
    │  │   /user      │ │  /employee  │ │   /health    │  │
    │  └──────────────┘ └─────────────┘ └──────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ Body/Id/Insert→400 │ NotFound→404 │ DB→500    │  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Create the MongoDB client and ping it (process exits if unreachable)
    3. Log mounted resources

    Shutdown:
    1. Close the MongoDB client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from docstore_crud import __version__
from docstore_crud.config import Settings, settings
from docstore_crud.database import close_client, create_client, ping
from docstore_crud.exceptions import (
    DatabaseError,
    DocStoreError,
    InsertFailedError,
    InvalidIdentifierError,
    NotFoundError,
)
from docstore_crud.middleware.logging import RequestLoggingMiddleware
from docstore_crud.middleware.request_id import RequestIDMiddleware, request_id_var
from docstore_crud.resources import enabled_resources
from docstore_crud.routes import health
from docstore_crud.routes.crud import build_crud_router
from docstore_crud.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (container runtimes capture it)
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Access lines come from RequestLoggingMiddleware instead
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Own the MongoDB client for the lifetime of the process.

    Startup sequence:
        1. Setup logging
        2. Create client, ping; an unreachable database aborts startup
        3. Publish the client on app.state for get_mongo_client
    Shutdown sequence:
        1. Close the client (releases pooled connections)
    """
    config: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("DocStore CRUD %s starting up...", __version__)

    client = create_client(config)
    try:
        await ping(client)
    except PyMongoError as e:
        logger.critical("Error connecting to database at %s: %s", config.mongo_url, e)
        await client.close()
        raise
    app.state.mongo_client = client

    for resource in app.state.resources:
        logger.info(
            "Serving %s → %s.%s", resource.path, resource.database, resource.collection
        )
    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("DocStore CRUD shutting down...")
    await close_client(client)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, kind: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=kind, message=message, request_id=request_id_var.get("") or None)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _describe_validation_errors(exc: RequestValidationError) -> str:
    """Flatten FastAPI's error list into "field: problem" phrases."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Request body could not be decoded"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        RequestValidationError  → 400 validation_error (malformed JSON / wrong types)
        InvalidIdentifierError  → 400 invalid_id
        InsertFailedError       → 400 insert_failed
        NotFoundError           → 404 not_found
        DatabaseError           → 500 database_error (generic message)
        DocStoreError (base)    → 500
        Exception (fallback)    → 500 internal_server_error

    Storage failures never expose driver messages in the response; they are
    logged server-side with their context.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Body was not JSON, or a field had the wrong type."""
        message = _describe_validation_errors(exc)
        logger.warning("[%s] Invalid request body: %s", request_id_var.get(""), message)
        return _error_response(status.HTTP_400_BAD_REQUEST, "validation_error", message)

    @app.exception_handler(InvalidIdentifierError)
    async def handle_invalid_identifier(request: Request, exc: InvalidIdentifierError):
        return _error_response(status.HTTP_400_BAD_REQUEST, exc.kind, exc.message)

    @app.exception_handler(InsertFailedError)
    async def handle_insert_failed(request: Request, exc: InsertFailedError):
        logger.warning(
            "[%s] Insert failed: %s | Context: %s", request_id_var.get(""), exc.message, exc.context
        )
        return _error_response(status.HTTP_400_BAD_REQUEST, exc.kind, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(status.HTTP_404_NOT_FOUND, exc.kind, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        """Database error: generic message to the client, details logged server-side."""
        logger.error(
            "[%s] Database error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context
        )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.kind, exc.message)

    @app.exception_handler(DocStoreError)
    async def handle_application_error(request: Request, exc: DocStoreError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.kind, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all; the stack trace is logged, never returned."""
        logger.error(
            "[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "internal_server_error",
            "An unexpected error occurred.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(config: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Settings to build from; defaults to the module singleton.
                ENABLED_RESOURCES decides which CRUD routers are mounted.

    Returns:
        Fully configured FastAPI instance. The MongoDB client is attached
        later, by the lifespan.
    """
    config = config or settings

    app = FastAPI(
        title="DocStore CRUD API",
        description="CRUD over MongoDB collections of users and employees.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.resources = enabled_resources(config)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    for resource in app.state.resources:
        app.include_router(build_crud_router(resource))
    app.include_router(health.router)

    return app


app = create_app()
