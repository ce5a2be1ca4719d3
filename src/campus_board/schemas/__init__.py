# src/campus_board/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .audit import AuditEntryResponse
from .comment import (
    BatchModerateRequest,
    BatchModerateResponse,
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    CommentView,
    ModerateCommentRequest,
    PostCommentForm,
)
from .common import ActionResult, ErrorResponse, Pagination
from .news import NewsCreate, NewsCreated, NewsListResponse, NewsReviewRequest, NewsView
from .profile import ProfileResponse, ProfileSummary, WhoAmIResponse
from .topic import TopicCreate, TopicListResponse, TopicSummary, TopicView

__all__ = [
    "AuditEntryResponse",
    "BatchModerateRequest", "BatchModerateResponse",
    "CommentCreate", "CommentListResponse", "CommentResponse", "CommentView",
    "ModerateCommentRequest", "PostCommentForm",
    "ActionResult", "ErrorResponse", "Pagination",
    "NewsCreate", "NewsCreated", "NewsListResponse", "NewsReviewRequest", "NewsView",
    "ProfileResponse", "ProfileSummary", "WhoAmIResponse",
    "TopicCreate", "TopicListResponse", "TopicSummary", "TopicView",
]
