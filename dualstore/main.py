"""
DualStore — FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, error mapping and
       lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn dualstore.main:app) or the `dualstore` console script.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────────┐             │
    │  │ Req ID   │→│ Logging  │→│  CORS    │             │
    │  └──────────┘ └──────────┘ └──────────┘             │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │ /api/pg/...  │ │ /api/mongo/..│ │ health      │  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ DualStoreError → STATUS_TABLE                │   │
    │  │ body validation → 400 INVALID_PARAMS         │   │
    │  │ unmatched route → 403 plain text             │   │
    │  │ anything else  → 500 SERVICE_ERROR           │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, log store targets (no connection is opened;
              both pools connect on first use)
    Shutdown: dispose the SQLAlchemy engine, close the Mongo client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dualstore import __version__
from dualstore.config import settings
from dualstore.database import dispose_engine
from dualstore.exceptions import (
    FALLBACK_STATUS,
    STORE_ERROR_KINDS,
    ClientError,
    DualStoreError,
    ValidationError,
)
from dualstore.middleware.logging import RequestLoggingMiddleware
from dualstore.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from dualstore.mongo import close_mongo_client
from dualstore.routes import customers, health, orders

logger = logging.getLogger(__name__)

FALLBACK_BODY = "nothing to see here"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout
    (Docker captures stdout). Level comes from LOG_LEVEL.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # These log every statement / heartbeat at DEBUG or INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("DualStore API %s starting up...", __version__)
    logger.info(
        "PostgreSQL: %s:%d/%s",
        settings.postgres_url,
        settings.postgres_port,
        settings.postgres_db,
    )
    logger.info(
        "MongoDB: %s (database=%s, collection=%s)",
        settings.mongodb_server,
        settings.mongodb_database,
        settings.mongodb_order_collection,
    )
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("DualStore API shutting down...")
    await dispose_engine()
    await close_mongo_client()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(status_code: int, client_error: ClientError) -> JSONResponse:
    """The one error envelope: {"error": {"type": <tag>}}."""
    return JSONResponse(
        status_code=status_code,
        content={"error": {"type": client_error.value}},
    )


def render_error(exc: DualStoreError) -> JSONResponse:
    """Log a DualStoreError with the request id and render its client tag."""
    rid = request_id_var.get("")
    status_code, client_error = exc.client_status_and_error()
    if exc.kind in STORE_ERROR_KINDS or status_code >= 500:
        logger.error(
            "[%s] %s %s: %s | Context: %s",
            rid, exc.kind.value, client_error.value, exc.message, exc.context,
        )
    else:
        logger.warning(
            "[%s] %s %s: %s | Context: %s",
            rid, exc.kind.value, client_error.value, exc.message, exc.context,
        )
    return error_response(status_code, client_error)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to client status codes and error tags.

    Handler hierarchy:
        DualStoreError          → STATUS_TABLE lookup by kind
        RequestValidationError  → ValidationError → 400 INVALID_PARAMS
        HTTPException 404       → 403 "nothing to see here" (no route matched)
        other HTTPException     → FastAPI default (e.g. 405)
        Exception (fallback)    → 500 SERVICE_ERROR

    Store details are logged here with the request id, never returned.
    """

    @app.exception_handler(DualStoreError)
    async def handle_dualstore_error(request: Request, exc: DualStoreError):
        return render_error(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return render_error(
            ValidationError(message="Request validation failed", context={"errors": exc.errors()})
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return PlainTextResponse(FALLBACK_BODY, status_code=403)
        return await http_exception_handler(request, exc)

    # Runs in ServerErrorMiddleware, outside RequestIDMiddleware: the ContextVar
    # is already reset, so the id comes from request.state.
    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = getattr(request.state, "request_id", "")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        status_code, client_error = FALLBACK_STATUS
        response = error_response(status_code, client_error)
        if rid:
            response.headers[REQUEST_ID_HEADER] = rid
        return response


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="DualStore API",
        description=(
            "CRUD over a PostgreSQL customer table (/api/pg) and a "
            "MongoDB order collection (/api/mongo)."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # Last added runs first: RequestID → Logging → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Accept", "Content-Type"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(customers.router)
    app.include_router(orders.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn on BACKEND_HOST:BACKEND_PORT."""
    import uvicorn

    uvicorn.run(
        "dualstore.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
