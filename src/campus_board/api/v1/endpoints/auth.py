"""Identity endpoints: who is calling and with which role."""

from __future__ import annotations

from fastapi import APIRouter

from campus_board.core.errors import NotFoundError
from campus_board.core.roles import require_actor
from campus_board.models import Profile
from campus_board.schemas.profile import ProfileResponse, WhoAmIResponse

from ..dependencies import ActorDep, SessionDep

router = APIRouter(tags=["authentication"])


@router.get("/whoami", response_model=WhoAmIResponse)
async def whoami(actor: ActorDep) -> WhoAmIResponse:
    """Return the resolved actor, or a null id for anonymous callers."""
    if actor is None:
        return WhoAmIResponse(id=None)
    return WhoAmIResponse(id=actor.id, role=actor.role, email=actor.email)


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(actor: ActorDep, db: SessionDep) -> Profile:
    """Return the caller's own profile."""
    actor = require_actor(actor)
    profile = db.get(Profile, actor.id)
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile
