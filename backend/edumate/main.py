"""
EduMate Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers;
       the lifespan owns logging setup, config validation, the shared
       GenerationClient and the database engine.
Who:   uvicorn (`uvicorn edumate.main:app`) and the test suite.

Application Layout:
    ┌──────────────────────────────────────────────────────────┐
    │  Middleware: RateLimit → RequestID → Logging → GZip/CORS │
    │                                                          │
    │  Routes:                                                 │
    │    POST /api/ai/generate-{quiz,flashcards,summary,all}   │
    │    POST/GET /api/notes, GET /api/notes/{id}              │
    │    POST/GET /api/projects, GET /api/projects/{id}        │
    │    GET /health                                           │
    │                                                          │
    │  Exception handlers: EduMateError → status from class,   │
    │                      anything else → generic 500         │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → validate settings (logged, not fatal) → build client
    Shutdown: close the client's HTTP pool → dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from edumate import __version__
from edumate.config import settings
from edumate.database import dispose_engine
from edumate.exceptions import EduMateError
from edumate.middleware.logging import RequestLoggingMiddleware
from edumate.middleware.rate_limit import RateLimitMiddleware
from edumate.middleware.request_id import RequestIDMiddleware, request_id_var
from edumate.routes import ai_generation, health, notes, projects
from edumate.services.generation_client import GeminiClientConfig, GenerationClient

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] edumate.services.generation_client: ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Chatty third-party loggers; httpx would also log the URL with the API key
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("EduMate Backend %s starting up...", __version__)

    # Not fatal: /health keeps answering and generation calls report
    # ConfigurationError until the key is set
    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    client = GenerationClient(GeminiClientConfig.from_settings(settings))
    app.state.generation_client = client
    logger.info("Gemini endpoint: %s", settings.gemini_api_url)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("EduMate Backend shutting down...")
    client.close()
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(exc: EduMateError, rid: str) -> dict:
    body = {
        "error": exc.error_code,
        "message": exc.client_message,
        "request_id": rid,
    }
    if exc.expose_message and exc.context:
        body["details"] = exc.context
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Render every EduMateError as {error, message, details?, request_id}
    with the status its class declares. Non-exposed errors (database,
    transport, configuration) get their generic public message; the real
    message and context are logged server-side only.
    """

    @app.exception_handler(EduMateError)
    async def handle_edumate_error(request: Request, exc: EduMateError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc, rid))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Generic 500; the stack trace goes to the log only."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="EduMate API",
        description=(
            "Generates quizzes, flashcards and summaries from study notes "
            "with the Google Gemini API, and stores notes and projects."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RateLimit → RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count", "Retry-After"],
        max_age=3600,
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    app.include_router(ai_generation.router)
    app.include_router(notes.router)
    app.include_router(projects.router)
    app.include_router(health.router)

    return app


app = create_app()
