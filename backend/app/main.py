"""
Contacts API — FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, middleware registration, route mounting,
       dependency wiring and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn app.main:app) and by the test suite.
When:  Once at server startup; the returned app handles all requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request Logging (X-Request-ID)         │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────┐ ┌──────────────────┐ ┌─────────────┐ │
    │  │  GET /   │ │ /contacts (CRUD) │ │ GET /health │ │
    │  └──────────┘ └──────────────────┘ └─────────────┘ │
    │                                                     │
    │  Docs: /api-docs (Swagger UI), /api-docs.json       │
    │                                                     │
    │  Exception Handlers:                                │
    │  InvalidId→400 │ Validation→400 │ NotFound→404 │    │
    │  Storage→500   │ anything else→500                  │
    └─────────────────────────────────────────────────────┘

Dependency Wiring:
    create_app() builds one Database (engine + session factory) and one
    ContactService around it, and stores the service on app.state. Handlers
    receive it through the get_contact_accessor dependency. Passing an
    `accessor` to create_app() replaces the database-backed one entirely.

Lifecycle:
    Startup:
    1. Initialize logging
    2. Create missing tables (when DB_CREATE_TABLES is on)
    3. Log the REST and documentation URLs

    Shutdown:
    1. Dispose database engine (close all connections)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app import __version__
from app.config import Settings, settings as default_settings
from app.database import Database
from app.exceptions import (
    ContactsAPIError,
    InvalidIdentifierError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from app.logging_config import setup_logging
from app.middleware.logging import RequestLoggingMiddleware, request_id_var
from app.routes import contacts, health, index
from app.services.contact_base import ContactAccessor
from app.services.contact_service import ContactService
from app.services.validation import MISSING, explain_field

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Manage application lifecycle: startup and shutdown procedures.

    A database that is down at startup is logged, not fatal: the server
    still answers /health (database: disconnected) and requests fail with
    500 until the database comes back.
    """
    config: Settings = app.state.settings
    database: Optional[Database] = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config)
    logger.info("Contacts API starting up (%s)...", config.environment)

    if database is not None and config.db_create_tables:
        try:
            await database.create_tables()
            logger.info("Connected to database")
        except Exception as e:
            logger.error("Database connection error: %s", str(e))

    logger.info("Server running on port %d", config.port)
    logger.info("REST API: %s/contacts", config.base_url)
    if config.docs_enabled:
        logger.info("API Documentation: %s/api-docs", config.base_url)
        logger.info("JSON Spec: %s/api-docs.json", config.base_url)
    else:
        logger.info("API documentation is disabled")

    yield  # Application runs here

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Contacts API shutting down...")
    if database is not None:
        await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[dict] = None) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        InvalidIdentifierError  → 400 Bad Request
        ValidationError         → 400 Bad Request
        RequestValidationError  → 400 Bad Request (FastAPI's body/query parsing)
        NotFoundError           → 404 Not Found
        StorageError            → 500 Internal Server Error (generic message)
        ContactsAPIError (base) → 500 Internal Server Error
        Exception (fallback)    → 500 Internal Server Error

    Security: 500 responses NEVER carry internal details (stack traces, SQL,
    driver messages). Details are logged server-side with the request ID.
    """

    @app.exception_handler(InvalidIdentifierError)
    async def handle_invalid_identifier(request: Request, exc: InvalidIdentifierError):
        logger.warning("[%s] Invalid identifier: %s", request_id_var.get(""), exc.identifier)
        return JSONResponse(
            status_code=400,
            content=_error_body("invalid_identifier", exc.message),
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        """Client sent invalid input — tell them what's wrong."""
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """
        Malformed JSON, wrong types, missing body fields or out-of-range
        query parameters. Reported as 400 like every other validation
        failure, instead of FastAPI's default 422.
        Contact fields are re-checked with the named rules so the client
        gets the same wording as validate_contact ("Birthday must be a
        valid date (YYYY-MM-DD)").
        """
        errors = {}
        rule_messages = set()
        for err in exc.errors():
            field = ".".join(str(part) for part in err.get("loc", ())[1:])
            value = MISSING if err.get("type") == "missing" else err.get("input")
            reason = explain_field(field, value)
            if reason:
                rule_messages.add(reason)
            else:
                reason = err.get("msg", "Invalid value")
            errors.setdefault(field, reason)
        field, reason = next(iter(errors.items()), ("", "Invalid request"))
        message = reason if not field or reason in rule_messages else f"{field}: {reason}"
        logger.warning("[%s] Request validation error: %s", request_id_var.get(""), message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", message, {"errors": errors}),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body("not_found", exc.message),
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        """Database error — generic message to user, details logged server-side."""
        rid = request_id_var.get("")
        logger.error("[%s] Storage error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error", "An internal error occurred. Please try again later."
            ),
        )

    @app.exception_handler(ContactsAPIError)
    async def handle_app_error(request: Request, exc: ContactsAPIError):
        rid = request_id_var.get("")
        logger.error("[%s] Unhandled application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error", "An internal error occurred. Please try again later."
            ),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all for truly unexpected errors.

        Guarantees a 500 JSON response instead of a crashed request.
        Stack trace is logged server-side ONLY (never in response).
        Runs outside RequestLoggingMiddleware, so it sets X-Request-ID itself.
        """
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            headers={"X-Request-ID": rid} if rid else None,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    config: Optional[Settings] = None,
    accessor: Optional[ContactAccessor] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config:   Settings to use (default: the module-level settings)
        accessor: Contact accessor to inject. When omitted, a Database and a
                  ContactService are built from `config`.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    config = config or default_settings

    app = FastAPI(
        title="Contacts API",
        description="API for managing contacts",
        version=__version__,
        docs_url="/api-docs" if config.docs_enabled else None,
        redoc_url=None,
        openapi_url="/api-docs.json" if config.docs_enabled else None,
        servers=config.openapi_servers or None,
        swagger_ui_parameters={"docExpansion": "list"},
        lifespan=lifespan,
    )

    # ── Wire Dependencies ─────────────────────────────────────────────────
    database: Optional[Database] = None
    if accessor is None:
        database = Database(config)
        accessor = ContactService(database)

    app.state.settings = config
    app.state.database = database
    app.state.contacts = accessor

    # ── Register Middleware ───────────────────────────────────────────────
    app.add_middleware(RequestLoggingMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(index.router)
    app.include_router(contacts.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Console entry point: serve `app.main:app` with uvicorn."""
    uvicorn.run(
        "app.main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.environment == "development",
        log_level=default_settings.log_level.lower(),
    )


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `app.main:app` to be importable
app = create_app()


if __name__ == "__main__":
    run()
