# src/campus_board/models/news.py
"""News articles and their editorial review."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campus_board.db.session import Base

from .mixins import CreatedAtMixin, UuidPrimaryKeyMixin
from .profile import Profile


class NewsStatus(StrEnum):
    """DRAFT -> PENDING -> PUBLISHED | REJECTED; moderators may publish a DRAFT directly."""

    DRAFT = "DRAFT"
    PENDING = "PENDING"
    PUBLISHED = "PUBLISHED"
    REJECTED = "REJECTED"


class NewsCategory(StrEnum):
    CAMPUS = "CAMPUS"
    GLOBAL = "GLOBAL"


class News(UuidPrimaryKeyMixin, CreatedAtMixin, Base):
    """A news article. Comments are accepted once it is PUBLISHED."""

    __tablename__ = "news"
    __table_args__ = (Index("ix_news_status_created", "status", "created_at"),)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str | None] = mapped_column(String(500), nullable=True)
    category: Mapped[NewsCategory] = mapped_column(
        Enum(NewsCategory, native_enum=False, length=16),
        nullable=False,
        default=NewsCategory.CAMPUS,
    )
    status: Mapped[NewsStatus] = mapped_column(
        Enum(NewsStatus, native_enum=False, length=16),
        nullable=False,
        default=NewsStatus.DRAFT,
    )
    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id"),
        nullable=False,
    )
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Set by approve/reject.
    reviewed_by: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("profiles.id"),
        nullable=True,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    review_note: Mapped[str | None] = mapped_column(String(500), nullable=True)

    author: Mapped[Profile] = relationship(Profile, foreign_keys=[author_id], lazy="joined")
    reviewer: Mapped[Profile | None] = relationship(Profile, foreign_keys=[reviewed_by])
