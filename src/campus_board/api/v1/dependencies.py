"""Shared API dependencies: database session, actor resolution, revalidator."""

from typing import Annotated

from fastapi import BackgroundTasks, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from campus_board.core.roles import Actor
from campus_board.core.security import decode_access_token
from campus_board.db.session import get_db
from campus_board.models import Profile
from campus_board.services.revalidation import (
    RecordingRevalidator,
    Revalidator,
    flush_revalidations,
)

# Anonymous requests are allowed through; each operation decides what they may do.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def resolve_actor(db: Session, token: str | None) -> Actor | None:
    """Map a bearer token onto the actor it identifies, if any."""
    if not token:
        return None
    profile_id = decode_access_token(token)
    if profile_id is None:
        return None
    profile = db.get(Profile, profile_id)
    if profile is None:
        return None
    return Actor(id=profile.id, role=profile.role, email=profile.email)


def get_current_actor(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> Actor | None:
    """Resolve the caller once per request; ``None`` for anonymous callers."""
    token = credentials.credentials if credentials is not None else None
    return resolve_actor(db, token)


def get_revalidator_dep(background_tasks: BackgroundTasks) -> Revalidator:
    """Collect this request's invalidation signals; deliver them after the response."""
    collected = RecordingRevalidator()
    background_tasks.add_task(flush_revalidations, collected)
    return collected


ActorDep = Annotated[Actor | None, Depends(get_current_actor)]
RevalidatorDep = Annotated[Revalidator, Depends(get_revalidator_dep)]
