# src/campus_board/models/topic.py
"""Discussion topics."""

from __future__ import annotations

from enum import StrEnum

from sqlalchemy import Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campus_board.db.session import Base

from .mixins import CreatedAtMixin, UuidPrimaryKeyMixin
from .profile import Profile


class TopicStatus(StrEnum):
    """OPEN topics accept new comments; LOCKED ones do not."""

    OPEN = "OPEN"
    LOCKED = "LOCKED"


class Topic(UuidPrimaryKeyMixin, CreatedAtMixin, Base):
    """A moderator-created discussion thread."""

    __tablename__ = "topics"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[TopicStatus] = mapped_column(
        Enum(TopicStatus, native_enum=False, length=16),
        nullable=False,
        default=TopicStatus.OPEN,
    )
    # Weak reference: lookup only, the topic does not own the profile.
    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id"),
        nullable=False,
    )

    author: Mapped[Profile] = relationship(Profile, lazy="joined")
