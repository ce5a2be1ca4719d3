"""Comment and moderation Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from campus_board.models.comment import CommentStatus
from campus_board.schemas.common import Pagination
from campus_board.schemas.profile import ProfileSummary
from campus_board.schemas.topic import TopicSummary

COMMENT_MAX_LENGTH = 1000
REASON_MAX_LENGTH = 500
BATCH_MAX_SIZE = 50
# Upper bound of the INTEGER primary key column.
COMMENT_ID_MAX = 2**31 - 1

ModerationTarget = Literal["APPROVED", "REJECTED"]


def _parse_comment_id(value: object) -> int:
    """Accept a string-encoded positive integer (plain ints are tolerated)."""
    if isinstance(value, bool):
        raise ValueError("Invalid comment id")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and value.strip().isdigit():
        parsed = int(value.strip())
    else:
        raise ValueError("Invalid comment id")
    if not 0 < parsed <= COMMENT_ID_MAX:
        raise ValueError("Invalid comment id")
    return parsed


class CommentCreate(BaseModel):
    """Schema for creating a comment or reply."""

    body: str = Field(..., min_length=1, max_length=COMMENT_MAX_LENGTH)
    topic_id: UUID | None = None
    news_id: UUID | None = None
    parent_id: int | None = Field(
        None,
        gt=0,
        le=COMMENT_ID_MAX,
        description="Comment being replied to",
    )

    @model_validator(mode="after")
    def _exactly_one_target(self) -> CommentCreate:
        if (self.topic_id is None) == (self.news_id is None):
            raise ValueError("Exactly one of topic_id or news_id is required")
        return self


class PostCommentForm(BaseModel):
    """Body of the topic-page comment form."""

    body: str = Field(..., min_length=1, max_length=COMMENT_MAX_LENGTH)


class ModerateCommentRequest(BaseModel):
    """Moderate a single comment."""

    comment_id: int
    status: ModerationTarget
    reason: str | None = Field(None, max_length=REASON_MAX_LENGTH)

    @field_validator("comment_id", mode="before")
    @classmethod
    def _comment_id(cls, value: object) -> int:
        return _parse_comment_id(value)


class BatchModerateRequest(BaseModel):
    """Moderate up to ``BATCH_MAX_SIZE`` comments in one request."""

    comment_ids: list[int] = Field(..., min_length=1, max_length=BATCH_MAX_SIZE)
    status: ModerationTarget
    reason: str | None = Field(None, max_length=REASON_MAX_LENGTH)

    @field_validator("comment_ids", mode="before")
    @classmethod
    def _comment_ids(cls, value: object) -> object:
        if not isinstance(value, list):
            return value
        return [_parse_comment_id(item) for item in value]


class CommentView(BaseModel):
    """Comment with its author, topic and moderator expanded."""

    id: int
    topic_id: str | None
    news_id: str | None
    parent_id: int | None
    body: str
    status: CommentStatus
    author_id: str
    moderated_by: str | None
    moderated_at: datetime | None
    reason: str | None
    created_at: datetime
    author: ProfileSummary | None = None
    topic: TopicSummary | None = None
    moderator: ProfileSummary | None = None
    replies: list[CommentView] = Field(default_factory=list)


class CommentResponse(BaseModel):
    data: CommentView
    message: str | None = None


class CommentListResponse(BaseModel):
    data: list[CommentView]
    pagination: Pagination


class BatchModerateResponse(BaseModel):
    message: str
    processed_count: int

CommentView.model_rebuild()
