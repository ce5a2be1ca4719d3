"""Profile-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from campus_board.core.roles import Role


class ProfileSummary(BaseModel):
    """Public subset of a profile embedded in other resources."""

    id: str
    display_name: str | None
    avatar_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ProfileResponse(BaseModel):
    """Full profile returned to its owner."""

    id: str
    display_name: str | None
    email: str | None
    role: Role
    avatar_url: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WhoAmIResponse(BaseModel):
    id: str | None
    role: Role | None = None
    email: str | None = None
