"""Main FastAPI application for the tennis ranking service."""

import asyncio
from contextlib import asynccontextmanager
from typing import Dict, Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import structlog

from app import __version__
from app.core import db_manager, get_global_settings
from app.core.logging import setup_logging
from app.features.players import players_router
from app.middleware import PerformanceMiddleware


settings = get_global_settings()
setup_logging(settings.log_level)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting up tennis ranking application", version=__version__)
    app.state.ranking_lock = asyncio.Lock()
    yield
    logger.info("Shutting down tennis ranking application")
    await db_manager.close()


# OpenAPI tags metadata
tags_metadata = [
    {
        "name": "players",
        "description": "Player roster management. Every change recomputes the ranking.",
    },
    {
        "name": "health",
        "description": "Health check and system status endpoints.",
    },
]

# Create FastAPI application
app = FastAPI(
    title="Tennis Ranking Service",
    description="""
    Manages a roster of tennis players and keeps their ranking consistent.

    * **Ranking**: list players ordered by rank position
    * **Players**: create, update and delete players; positions are recomputed
      from points after every change, with no gaps and no shared positions
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
    debug=settings.debug,
)

app.add_middleware(PerformanceMiddleware)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(players_router, prefix="/api/v1")


@app.get("/health", tags=["health"])
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint.

    Returns the health status of the application, its version and debug mode.
    """
    return {
        "status": "healthy",
        "message": "Application is running",
        "version": __version__,
        "debug": settings.debug,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
