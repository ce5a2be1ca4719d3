"""Topic-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from campus_board.models.topic import TopicStatus
from campus_board.schemas.common import Pagination
from campus_board.schemas.profile import ProfileSummary


class TopicCreate(BaseModel):
    """Schema for creating a new topic."""

    title: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1)


class TopicSummary(BaseModel):
    id: str
    title: str

    model_config = ConfigDict(from_attributes=True)


class TopicView(BaseModel):
    """Topic as shown in lists and on its own page."""

    id: str
    title: str
    body: str
    status: TopicStatus
    author_id: str
    author: ProfileSummary | None
    created_at: datetime
    comment_count: int = Field(0, description="Approved comments on the topic")


class TopicListResponse(BaseModel):
    data: list[TopicView]
    pagination: Pagination
