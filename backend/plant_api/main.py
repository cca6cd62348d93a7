"""
Plant API — FastAPI Application Factory
========================================

What:  Builds the FastAPI application: services, middleware, exception
       handlers and routers.
How:   `create_app(settings)` constructs every shared object once (engine,
       session factory, hasher, token service, media host) and stores it on
       `app.state`; handlers reach them through the providers in
       dependencies.py.
Who:   uvicorn (`uvicorn plant_api.main:app`), the `plant-api` console
       script, and the test suite (which passes its own Settings).

Lifecycle:
    Startup:
    1. Configure logging
    2. Validate required secrets (logged, the server still starts)
    Shutdown:
    1. Dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from plant_api import __version__
from plant_api.config import Settings, get_settings
from plant_api.database import build_engine, build_session_factory
from plant_api.exceptions import (
    AuthenticationRequiredError,
    ConflictError,
    DatabaseError,
    InvalidCredentialsError,
    MediaHostError,
    NotFoundError,
    PasswordHashError,
    PlantAPIError,
    TokenVerificationError,
    UploadError,
    ValidationError,
)
from plant_api.middleware.auth import require_user
from plant_api.middleware.logging import RequestLoggingMiddleware
from plant_api.middleware.rate_limit import RateLimitMiddleware
from plant_api.middleware.request_id import RequestIDMiddleware, request_id_var
from plant_api.routes import auth, categories, health, plants, upload
from plant_api.services.auth_service import AuthService
from plant_api.services.category_service import CategoryService
from plant_api.services.cloudinary_host import CloudinaryMediaHost
from plant_api.services.password_hasher import PasswordHasher
from plant_api.services.plant_service import PlantService
from plant_api.services.token_service import TokenService
from plant_api.services.upload_service import UploadService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] plant_api.access: GET /plants 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings)
    logger.info("=" * 60)
    logger.info("Plant API %s starting up (environment=%s)", __version__, settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Affected endpoints will fail until the configuration is fixed.")

    if settings.require_auth_for_resources:
        logger.info("Plants, categories and uploads require a bearer token")
    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Plant API shutting down...")
    await app.state.engine.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details=None) -> dict:
    body = {"error": error, "message": message}
    if details is not None:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """
    Map every PlantAPIError subclass to its status code and JSON body.

    Handler table:
        ValidationError, RequestValidationError → 400 validation_error
        UploadError                             → 400 upload_error
        InvalidCredentialsError                 → 400 invalid_credentials
        AuthenticationRequiredError             → 401 unauthorized
        TokenVerificationError                  → 403 forbidden
        NotFoundError                           → 404 not_found
        ConflictError                           → 409 conflict
        DatabaseError, PasswordHashError,
        MediaHostError, PlantAPIError           → 500 server_error
        Exception                               → 500 internal_server_error

    Exception context is logged, never returned. For 500s the exception text
    is returned as `details` only in development.

    429s never reach these handlers: RateLimitMiddleware answers them itself.
    The catch-all runs outside the middleware stack, so it sets X-Request-ID
    on its own response.
    """

    def client_error(status_code: int, error: str, headers: Optional[dict] = None):
        async def handler(request: Request, exc: PlantAPIError) -> JSONResponse:
            rid = request_id_var.get("")
            logger.warning(
                "[%s] %s %s → %d %s | Context: %s",
                rid,
                request.method,
                request.url.path,
                status_code,
                exc.message,
                exc.context,
            )
            return JSONResponse(
                status_code=status_code,
                content=_error_body(error, exc.message),
                headers=headers,
            )
        return handler

    def server_error(
        error: str,
        message: str,
        exc: Exception,
        headers: Optional[dict] = None,
    ) -> JSONResponse:
        details = str(exc) if settings.is_development else None
        return JSONResponse(
            status_code=500,
            content=_error_body(error, message, details),
            headers=headers,
        )

    app.add_exception_handler(ValidationError, client_error(400, "validation_error"))
    app.add_exception_handler(UploadError, client_error(400, "upload_error"))
    app.add_exception_handler(InvalidCredentialsError, client_error(400, "invalid_credentials"))
    app.add_exception_handler(
        AuthenticationRequiredError,
        client_error(401, "unauthorized", headers={"WWW-Authenticate": "Bearer"}),
    )
    app.add_exception_handler(TokenVerificationError, client_error(403, "forbidden"))
    app.add_exception_handler(NotFoundError, client_error(404, "not_found"))
    app.add_exception_handler(ConflictError, client_error(409, "conflict"))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Malformed JSON, wrong types, non-integer ids."""
        rid = request_id_var.get("")
        logger.warning("[%s] Request validation failed: %s", rid, exc.errors())
        return JSONResponse(
            status_code=400,
            content=_error_body(
                "validation_error",
                "Request validation failed",
                jsonable_encoder(exc.errors()),
            ),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return server_error(
            "server_error",
            "An internal error occurred. Please try again later.",
            exc.__cause__ or exc,
        )

    @app.exception_handler(PasswordHashError)
    async def handle_password_hash_error(request: Request, exc: PasswordHashError):
        rid = request_id_var.get("")
        logger.error("[%s] Password hashing failed: %s", rid, exc.context)
        return server_error("server_error", exc.message, exc.__cause__ or exc)

    @app.exception_handler(MediaHostError)
    async def handle_media_host_error(request: Request, exc: MediaHostError):
        rid = request_id_var.get("")
        logger.error("[%s] Media host error: %s | Context: %s", rid, exc.message, exc.context)
        return server_error("server_error", exc.message, exc.__cause__ or exc)

    @app.exception_handler(PlantAPIError)
    async def handle_plant_api_error(request: Request, exc: PlantAPIError):
        rid = request_id_var.get("")
        logger.error("[%s] Unhandled application error: %s | Context: %s", rid, exc.message, exc.context)
        return server_error("server_error", exc.message, exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = getattr(request.state, "request_id", "") or request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return server_error(
            "internal_server_error",
            "An unexpected error occurred. Please try again later.",
            exc,
            headers={"X-Request-ID": rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to build against; defaults to the process
                  settings read from the environment.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Plant API",
        description=(
            "Plant catalogue backend: accounts with bearer tokens, plant and "
            "category CRUD, and photo uploads relayed to Cloudinary."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Shared Objects ────────────────────────────────────────────────────
    engine = build_engine(settings)
    token_service = TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_minutes=settings.jwt_expires_minutes,
    )
    media_host = CloudinaryMediaHost(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        timeout=settings.upload_timeout_seconds,
        max_dimension=settings.upload_max_dimension,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_service = token_service
    app.state.auth_service = AuthService(PasswordHasher(settings.bcrypt_rounds), token_service)
    app.state.category_service = CategoryService()
    app.state.plant_service = PlantService()
    app.state.upload_service = UploadService(media_host, settings.upload_max_file_size)

    # ── Middleware ────────────────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → RateLimit → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(
        RateLimitMiddleware,
        requests=settings.auth_rate_limit_requests,
        window=settings.auth_rate_limit_window,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app, settings)

    # ── Routes ────────────────────────────────────────────────────────────
    resource_dependencies = (
        [Depends(require_user)] if settings.require_auth_for_resources else []
    )
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(plants.router, dependencies=resource_dependencies)
    app.include_router(categories.router, dependencies=resource_dependencies)
    app.include_router(upload.router, dependencies=resource_dependencies)

    return app


app = create_app()


def run() -> None:
    """Entry point for the `plant-api` console script."""
    settings = get_settings()
    uvicorn.run(
        "plant_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
