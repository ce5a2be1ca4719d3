"""News and editorial review Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from campus_board.models.news import NewsCategory, NewsStatus
from campus_board.schemas.common import Pagination
from campus_board.schemas.profile import ProfileSummary

NEWS_TITLE_MAX_LENGTH = 200
NEWS_SUMMARY_MAX_LENGTH = 500
REVIEW_NOTE_MAX_LENGTH = 500


class NewsCreate(BaseModel):
    """Schema for writing a news article or a submission."""

    title: str = Field(..., min_length=1, max_length=NEWS_TITLE_MAX_LENGTH)
    body: str = Field(..., min_length=1)
    summary: str | None = Field(None, max_length=NEWS_SUMMARY_MAX_LENGTH)
    category: NewsCategory = NewsCategory.CAMPUS
    draft: bool = Field(False, description="Keep the article as a DRAFT instead of publishing it")


class NewsReviewRequest(BaseModel):
    note: str | None = Field(None, max_length=REVIEW_NOTE_MAX_LENGTH)


class NewsView(BaseModel):
    """News article as shown in lists, on its own page and in the review queue."""

    id: str
    title: str
    body: str
    summary: str | None
    category: NewsCategory
    status: NewsStatus
    author_id: str
    author: ProfileSummary | None
    created_at: datetime
    published_at: datetime | None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    review_note: str | None = None


class NewsCreated(BaseModel):
    success: bool = True
    data: NewsView
    message: str


class NewsListResponse(BaseModel):
    data: list[NewsView]
    pagination: Pagination
