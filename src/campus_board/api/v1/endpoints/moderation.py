"""Moderation audit trail endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from campus_board.core.roles import CAN_MODERATE, require_role
from campus_board.schemas.audit import AuditEntryResponse
from campus_board.services import audit as audit_service

from ..dependencies import ActorDep, SessionDep

router = APIRouter(prefix="/moderation", tags=["moderation"])


@router.get("/audit", response_model=list[AuditEntryResponse])
async def get_audit_trail(
    actor: ActorDep,
    db: SessionDep,
    limit: int = Query(50, ge=1, le=100),
    before: int | None = Query(None),
) -> list[AuditEntryResponse]:
    """Recent moderator and administrator actions, newest first."""
    require_role(actor, CAN_MODERATE)
    entries = audit_service.list_entries(db, limit=limit, before=before)
    return [
        AuditEntryResponse(
            id=entry.id,
            actor_id=entry.actor_id,
            action=entry.action,
            target_type=entry.target_type,
            target_ids=entry.target_id_list,
            status=entry.status,
            reason=entry.reason,
            created_at=entry.created_at,
        )
        for entry in entries
    ]
