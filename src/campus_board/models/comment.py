# src/campus_board/models/comment.py
"""Comments attached to topics or news items."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campus_board.db.session import Base

from .mixins import CreatedAtMixin
from .news import News
from .profile import Profile
from .topic import Topic


class CommentStatus(StrEnum):
    """Comment lifecycle. PENDING is initial; the other two are terminal."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


MODERATION_TARGETS: frozenset[CommentStatus] = frozenset(
    {CommentStatus.APPROVED, CommentStatus.REJECTED}
)


class Comment(CreatedAtMixin, Base):
    """A single comment or reply awaiting, or past, moderation."""

    __tablename__ = "comments"
    __table_args__ = (
        Index("ix_comments_topic_status", "topic_id", "status"),
        Index("ix_comments_news_status", "news_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Exactly one of topic_id / news_id is set.
    topic_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("topics.id", ondelete="CASCADE"),
        nullable=True,
    )
    news_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("news.id", ondelete="CASCADE"),
        nullable=True,
    )
    # Replies point at a comment on the same topic/news item.
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
    )

    body: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[CommentStatus] = mapped_column(
        Enum(CommentStatus, native_enum=False, length=16),
        nullable=False,
        default=CommentStatus.PENDING,
    )
    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id"),
        nullable=False,
    )

    moderated_by: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("profiles.id"),
        nullable=True,
    )
    moderated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reason: Mapped[str | None] = mapped_column(String(500), nullable=True)

    author: Mapped[Profile] = relationship(Profile, foreign_keys=[author_id])
    moderator: Mapped[Profile | None] = relationship(Profile, foreign_keys=[moderated_by])
    topic: Mapped[Topic | None] = relationship(Topic)
    news: Mapped[News | None] = relationship(News)
    parent: Mapped[Comment | None] = relationship(
        "Comment",
        remote_side=[id],
        back_populates="replies",
    )
    replies: Mapped[list[Comment]] = relationship(
        "Comment",
        back_populates="parent",
        order_by="Comment.created_at",
    )

    @property
    def thread_path(self) -> str:
        """Page that renders this comment's thread."""
        if self.topic_id is not None:
            return f"/topics/{self.topic_id}"
        return f"/news/{self.news_id}"
