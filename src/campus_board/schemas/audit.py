"""Audit trail schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from campus_board.models.audit import AuditAction


class AuditEntryResponse(BaseModel):
    id: int
    actor_id: str
    action: AuditAction
    target_type: str
    target_ids: list[str]
    status: str | None
    reason: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
