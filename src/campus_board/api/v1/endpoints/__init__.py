# src/campus_board/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .comments import router as comments_router
from .moderation import router as moderation_router
from .news import router as news_router
from .topics import router as topics_router

__all__ = [
    "auth_router",
    "comments_router",
    "moderation_router",
    "news_router",
    "topics_router",
]
