"""
Tourlist Backend - FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the shared components (Database, SessionResolver,
       media and upload services), stores them on `app.state`, registers
       middleware, exception handlers and routers.
Who:   uvicorn (`uvicorn app.main:app`), tests (create_app(test_settings)).

Application Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │                      FastAPI App                        │
    │                                                         │
    │  Middleware Chain:                                      │
    │  ┌──────────┐ ┌──────────┐ ┌──────────────┐ ┌────────┐  │
    │  │ Req ID   │→│ Logging  │→│ Session gate │→│ CORS   │  │
    │  └──────────┘ └──────────┘ └──────────────┘ └────────┘  │
    │                                                         │
    │  Routes:                                                │
    │  /attraction-categories  /attractions  /hotels          │
    │  /reviews  /user/reviews  /bookings  /user/bookings     │
    │  /upload  /health                                       │
    │                                                         │
    │  Exception Handlers:                                    │
    │  TourlistError → its status/code │ request body → 400   │
    │  anything else → 500                                    │
    └─────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, report missing production settings
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.auth import SessionResolver
from app.config import Settings, settings as default_settings
from app.database import Database
from app.exceptions import TourlistError
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.middleware.session_gate import SessionGateMiddleware
from app.routes import attractions, bookings, categories, health, hotels, reviews, upload
from app.services.media_service import CloudinaryMediaService
from app.services.upload_service import UploadService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once at startup.

    Format: 2024-01-15T12:00:00 [INFO] app.services.category_service: ...
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("=" * 60)
    logger.info("Tourlist Backend %s starting up...", __version__)

    try:
        config.validate_required_for_production()
    except ValueError as e:
        # Keep serving: public listings and /health still work
        logger.error("Configuration error: %s", str(e))

    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Tourlist Backend shutting down...")
    await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, code: str, details: Optional[dict] = None) -> dict:
    body = {"error": error, "code": code, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the standard error body.

    Handler hierarchy:
        TourlistError            → exc.status_code / exc.code
                                   (4xx: message + details, 5xx: message only)
        RequestValidationError   → 400 validation_error naming the field
        Exception (fallback)     → 500 internal_server_error

    Context attached to 5xx errors is logged server-side only.
    """

    @app.exception_handler(TourlistError)
    async def handle_tourlist_error(request: Request, exc: TourlistError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error(
                "[%s] %s: %s | Context: %s",
                rid,
                type(exc).__name__,
                exc.message,
                exc.context,
            )
            return JSONResponse(
                status_code=exc.status_code,
                content=_error_body(exc.message, exc.code),
            )

        logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        # Auth failures never echo which role or operation was checked
        details = None if exc.status_code == 401 else exc.context
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, exc.code, details),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """
        Malformed request (e.g. `maxVisitors: "many"`): 400, not FastAPI's 422.
        """
        errors = exc.errors()
        first = errors[0] if errors else {}
        # loc looks like ("body", "maxVisitors") or ("path", "hotel_id")
        loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or None
        message = f"Invalid value for '{field}'" if field else "Invalid request body"
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), errors)
        details = {"field": field} if field else None
        return JSONResponse(
            status_code=400,
            content=_error_body(message, "validation_error", details),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "An unexpected error occurred. Please try again or contact support.",
                "internal_server_error",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Override the module-level settings (tests pass their own)

    Shared components on `app.state`:
        settings, database, session_resolver, media_service, upload_service
    """
    config = settings or default_settings

    app = FastAPI(
        title="Tourlist API",
        description=(
            "Tourism listings: attraction categories, attractions, hotels, "
            "reviews and bookings, with admin-managed listings and image upload."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = config
    app.state.database = Database(config)
    app.state.session_resolver = SessionResolver(config)
    app.state.media_service = CloudinaryMediaService(config)
    app.state.upload_service = UploadService.from_settings(config)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added executes first: RequestID → Logging → SessionGate → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(
        SessionGateMiddleware,
        resolver=app.state.session_resolver,
        sign_in_path=config.sign_in_path,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    for module in (categories, attractions, hotels, reviews, bookings, upload):
        app.include_router(module.router, prefix=config.api_prefix)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `app.main:app` to be importable
app = create_app()
