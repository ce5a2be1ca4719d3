"""Moderation audit trail."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from campus_board.core.roles import Actor
from campus_board.models import AuditAction, ModerationAuditEntry

logger = logging.getLogger(__name__)


def record_action(
    db: Session,
    actor: Actor,
    action: AuditAction,
    target_type: str,
    target_ids: Iterable[int | str],
    *,
    status: str | None = None,
    reason: str | None = None,
) -> ModerationAuditEntry:
    """Stage an audit entry in the caller's transaction and log it.

    The entry is committed, or rolled back, together with the action.
    """
    ids = [str(target_id) for target_id in target_ids]
    entry = ModerationAuditEntry(
        actor_id=actor.id,
        action=action,
        target_type=target_type,
        target_ids=",".join(ids),
        status=status,
        reason=reason,
    )
    db.add(entry)
    logger.info(
        "audit actor=%s role=%s action=%s %s=%s status=%s",
        actor.id,
        actor.role,
        action,
        target_type,
        ids,
        status,
    )
    return entry


def list_entries(
    db: Session,
    *,
    limit: int = 50,
    before: int | None = None,
) -> list[ModerationAuditEntry]:
    """Return audit entries newest first, paging on ``id < before``."""
    query = db.query(ModerationAuditEntry)
    if before is not None:
        query = query.filter(ModerationAuditEntry.id < before)
    return query.order_by(ModerationAuditEntry.id.desc()).limit(limit).all()
