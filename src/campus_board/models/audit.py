# src/campus_board/models/audit.py
"""Audit trail of moderator and administrator actions."""

from __future__ import annotations

from enum import StrEnum

from sqlalchemy import Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from campus_board.db.session import Base

from .mixins import CreatedAtMixin


class AuditAction(StrEnum):
    MODERATE = "MODERATE"
    BATCH_MODERATE = "BATCH_MODERATE"
    DELETE_COMMENT = "DELETE_COMMENT"
    CREATE_TOPIC = "CREATE_TOPIC"
    LOCK_TOPIC = "LOCK_TOPIC"
    UNLOCK_TOPIC = "UNLOCK_TOPIC"
    DELETE_TOPIC = "DELETE_TOPIC"
    CREATE_NEWS = "CREATE_NEWS"
    PUBLISH_NEWS = "PUBLISH_NEWS"
    APPROVE_NEWS = "APPROVE_NEWS"
    REJECT_NEWS = "REJECT_NEWS"


class ModerationAuditEntry(CreatedAtMixin, Base):
    """Immutable record written in the same transaction as the action."""

    __tablename__ = "moderation_audit"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Not a foreign key: entries outlive deleted profiles.
    actor_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    action: Mapped[AuditAction] = mapped_column(
        Enum(AuditAction, native_enum=False, length=32),
        nullable=False,
    )
    # "comment", "topic" or "news".
    target_type: Mapped[str] = mapped_column(String(16), nullable=False)
    # Comma separated, so a batch is one row.
    target_ids: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str | None] = mapped_column(String(16), nullable=True)
    reason: Mapped[str | None] = mapped_column(String(500), nullable=True)

    @property
    def target_id_list(self) -> list[str]:
        return [part for part in self.target_ids.split(",") if part]
