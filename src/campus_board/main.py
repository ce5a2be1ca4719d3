# src/campus_board/main.py
"""Main entry point for the Campus Board application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from campus_board.api.v1 import (
    auth_router,
    comments_router,
    moderation_router,
    news_router,
    topics_router,
)
from campus_board.api.v1.responses import register_exception_handlers
from campus_board.core.log_config import configure_logging
from campus_board.core.settings import settings
from campus_board.services.revalidation import get_notifier

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    logger.info("%s %s starting", settings.app_name, settings.app_version)
    try:
        yield
    finally:
        await get_notifier().aclose()
        get_notifier.cache_clear()


# Initialize FastAPI app
app = FastAPI(
    title="Campus Board API",
    description="Campus news and discussion board with moderated comments",
    version=settings.app_version,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

register_exception_handlers(app)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(topics_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(moderation_router, prefix="/api/v1")
app.include_router(news_router, prefix="/api/v1")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("campus_board.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
