"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config import get_settings
from shared.exceptions import RentHubError, AuthenticationError
from shared.logging_config import configure_logging
from .routes import health, users
from modules.profiles.routes import router as profiles_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting %s on %s:%s", settings.app_name, settings.host, settings.port)
    if not settings.supabase_service_role_key:
        logger.warning(
            "SUPABASE_SERVICE_ROLE_KEY is not set; profile creation will not work"
        )
    yield
    logger.info("Shutting down %s", settings.app_name)


async def renthub_error_handler(request: Request, exc: RentHubError) -> JSONResponse:
    """Render a RentHubError as a JSON error body."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)

    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers,
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Identity, profile and session API for the RentHub rental marketplace",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.add_exception_handler(RentHubError, renthub_error_handler)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(users.router, prefix="/api/users", tags=["users"])
    app.include_router(profiles_router, prefix="/api", tags=["profiles"])

    return app


# Application instance for uvicorn
app = create_app()
