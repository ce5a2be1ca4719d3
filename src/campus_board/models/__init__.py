# src/campus_board/models/__init__.py
"""SQLAlchemy models for the Campus Board application."""

from .audit import AuditAction, ModerationAuditEntry
from .comment import Comment, CommentStatus
from .news import News, NewsCategory, NewsStatus
from .profile import Profile
from .topic import Topic, TopicStatus

__all__ = [
    "AuditAction", "ModerationAuditEntry",
    "Comment", "CommentStatus",
    "News", "NewsCategory", "NewsStatus",
    "Profile",
    "Topic", "TopicStatus",
]
