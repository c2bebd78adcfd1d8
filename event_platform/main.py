"""
FastAPI application entry point for the Event Management Platform identity API.

Serves registration, sign-in and token refresh on top of salted PBKDF2
credential hashing.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Tuple, Type

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .domain.exceptions import (
    AuthenticationException,
    CryptoUnavailableException,
    DomainException,
    DuplicateEntityException,
    EntityNotFoundException,
    ValidationException,
)
from .infrastructure.database.connection import DatabaseManager, init_db
from .infrastructure.database.seed import seed_development_data
from .logging_config import configure_logging

settings = get_settings()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Manages startup and shutdown tasks.
    """
    configure_logging(settings)
    logger.info("Starting %s v%s", settings.app_name, settings.app_version)
    logger.info("Environment: %s", settings.environment)

    try:
        await init_db()
    except Exception:
        logger.exception("Database initialization failed")
        raise

    if settings.seeds_development_data:
        await seed_development_data(settings)

    yield

    logger.info("Shutting down application...")
    await DatabaseManager.close()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application.
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Event Management Platform API - identity and credential management",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allowed_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allowed_methods,
        allow_headers=settings.cors.allowed_headers,
    )

    register_exception_handlers(app)
    register_routes(app)

    return app


# Most specific first; anything else derived from DomainException is a 400.
ERROR_STATUS: Tuple[Tuple[Type[DomainException], int], ...] = (
    (AuthenticationException, status.HTTP_401_UNAUTHORIZED),
    (DuplicateEntityException, status.HTTP_409_CONFLICT),
    (EntityNotFoundException, status.HTTP_404_NOT_FOUND),
    (ValidationException, 422),
    (CryptoUnavailableException, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(exc: DomainException) -> int:
    """HTTP status for a domain error."""
    for exc_type, status_code in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException):
        status_code = status_for(exc)
        headers = None
        if status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        elif status_code == status.HTTP_503_SERVICE_UNAVAILABLE:
            logger.critical("Secure randomness unavailable: %s", exc.message)
        return JSONResponse(status_code=status_code, content=exc.to_dict(), headers=headers)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

        content = {
            'error': 'INTERNAL_ERROR',
            'message': 'An internal error occurred',
        }
        if settings.debug:
            content.update(message=str(exc), type=type(exc).__name__)

        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_routes(app: FastAPI) -> None:
    """Register API routes."""

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Check application health."""
        from .infrastructure.database.connection import health_check as db_health

        db_ok = await db_health()

        return {
            'status': 'healthy' if db_ok else 'degraded',
            'services': {
                'database': 'up' if db_ok else 'down',
            },
            'version': settings.app_version,
            'environment': settings.environment,
        }

    from .api.routes import api_router

    main_router = APIRouter(prefix=settings.api_prefix)
    main_router.include_router(api_router)

    app.include_router(main_router)


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "event_platform.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        workers=settings.workers,
    )
