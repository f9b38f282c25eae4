"""
FastAPI Application

Main entry point for the Marketplace API.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from marketplace.config import get_settings
from marketplace.config.logging import configure_logging
from marketplace.database import create_database
from marketplace.serving.api.graphql import create_graphql_router
from marketplace.serving.api.middleware import RequestLoggingMiddleware
from marketplace.serving.api.routes import health_router

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database handle for the lifetime of the application."""
    configure_logging()
    logger.info("Starting Marketplace API", environment=settings.app_env)

    database = create_database()
    await database.connect()
    app.state.database = database

    yield

    logger.info("Shutting down...")
    await database.dispose()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="Marketplace API",
        description="GraphQL read model over users, products, raffles, reviews and sales",
        version=settings.version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health_router, prefix="/api/v1", tags=["Health"])
    app.include_router(create_graphql_router(), prefix="/api/graphql", tags=["GraphQL"])

    @app.get("/api/v1/info")
    async def api_info():
        """API information endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.version,
            "environment": settings.app_env,
            "graphql": "/api/graphql",
        }

    return app


app = create_app()
