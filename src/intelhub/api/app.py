"""
Main FastAPI application for the IntelHub backend
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import settings
from ..database import init_database
from ..database.connection import dispose_database
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware
from ..redis_pool import check_redis_health, close_redis_pool

# Configure logging before creating logger
configure_logging(debug=settings.debug)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting IntelHub API...")
    init_database()
    logger.info("Database initialized")

    from ..auth.factory import get_form_providers
    from ..validation import (
        ValidationError,
        get_startup_recommendations,
        validate_startup_configuration,
    )

    validation_results = await validate_startup_configuration()
    if not validation_results["overall_valid"]:
        logger.error(
            "Application configuration validation failed - some features may not work properly",
            database_errors=validation_results["database"]["errors"],
            auth_errors=validation_results["auth"]["errors"],
        )
        if settings.environment.lower() in ("production", "prod"):
            raise ValidationError("Critical configuration validation failed in production")
    else:
        logger.info(
            "Authentication providers configured",
            providers=[provider.name for provider in get_form_providers()],
        )

    recommendations = get_startup_recommendations(validation_results)
    if recommendations:
        logger.info("Configuration recommendations", recommendations=recommendations)

    yield

    logger.info("Shutting down IntelHub API...")
    await close_redis_pool()
    await dispose_database()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="IntelHub API",
        description="Threat intelligence platform: users, roles and access management",
        version="0.1.0",
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(LoggingContextMiddleware)

    # Session cookies require credentials, hence explicit origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        redis_ok = await check_redis_health()
        return {
            "status": "healthy" if redis_ok else "degraded",
            "version": "0.1.0",
            "redis": "ok" if redis_ok else "unavailable",
        }

    # GraphQL endpoint (allow disabling for tests)
    if not os.getenv("INTELHUB_DISABLE_GRAPHQL"):
        try:
            from ..graphql.schema import create_graphql_router, validate_schema

            logger.info("Validating GraphQL schema...")
            validate_schema()

            app.include_router(create_graphql_router(), prefix="")
            logger.info("GraphQL endpoint initialized successfully", endpoint="/graphql")
        except Exception as e:  # pragma: no cover
            logger.error("Failed to initialize GraphQL endpoint", error=str(e))
            raise

    from .endpoints import view_parameters

    app.include_router(
        view_parameters.router, prefix="/api/view-parameters", tags=["View parameters"]
    )

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "intelhub.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
