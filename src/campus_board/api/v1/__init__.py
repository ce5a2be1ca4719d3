# src/campus_board/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    comments_router,
    moderation_router,
    news_router,
    topics_router,
)

__all__ = [
    "auth_router",
    "comments_router",
    "moderation_router",
    "news_router",
    "topics_router",
]
