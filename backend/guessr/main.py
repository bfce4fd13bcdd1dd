"""FastAPI application entry point.

This module configures the FastAPI application with:
- CORS middleware for frontend communication
- API v1 router with all endpoints
- Database engine lifecycle management
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from guessr.api.v1.api import api_router
from guessr.core.config import settings
from guessr.core.database import close_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events.

    The database engine is created lazily on the first request and
    disposed on shutdown.
    """
    # Startup
    logger.info(f"Starting {settings.PROJECT_NAME} API ({settings.ENVIRONMENT})...")

    yield  # Application is running

    # Shutdown
    logger.info(f"Shutting down {settings.PROJECT_NAME} API...")

    try:
        await close_db()
        logger.info("Database engine disposed")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


app = FastAPI(
    title=f"{settings.PROJECT_NAME} API",
    description="Community map pages with live Street View previews",
    version=settings.VERSION,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API v1 router
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/api/health")
async def health_check():
    """Health check endpoint.

    Returns basic health status. For service details use /api/v1/status.
    """
    return {"status": "ok", "service": "guessr-backend"}


@app.get("/api/v1/status")
async def status_check():
    """API status endpoint with service health details."""
    return {
        "status": "running",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "services": {
            "preview": {
                "cycle_seconds": settings.PREVIEW_CYCLE_SECONDS,
                "fade_seconds": settings.PREVIEW_FADE_SECONDS,
                "streetview_configured": bool(settings.STREETVIEW_API_KEY),
            },
        },
    }
