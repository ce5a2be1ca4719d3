# src/campus_board/services/__init__.py
"""Business logic services for the Campus Board application."""

from . import audit, comments, news, projections, topics
from .revalidation import (
    RecordingRevalidator,
    RevalidationNotifier,
    Revalidator,
    WebhookNotifier,
    get_notifier,
)

__all__ = [
    "audit",
    "comments",
    "news",
    "projections",
    "topics",
    "Revalidator",
    "RecordingRevalidator",
    "RevalidationNotifier",
    "WebhookNotifier",
    "get_notifier",
]
