"""Roles, named permission sets and the permission gate."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from campus_board.core.errors import ForbiddenError, UnauthenticatedError


class Role(StrEnum):
    """Roles a profile can hold. Role is the only authorization signal."""

    ADMIN = "ADMIN"
    MOD = "MOD"
    MEMBER = "MEMBER"


CAN_MODERATE: frozenset[Role] = frozenset({Role.ADMIN, Role.MOD})
CAN_MANAGE_TOPICS: frozenset[Role] = frozenset({Role.ADMIN, Role.MOD})
CAN_PUBLISH_NEWS: frozenset[Role] = frozenset({Role.ADMIN, Role.MOD})
CAN_COMMENT: frozenset[Role] = frozenset({Role.ADMIN, Role.MOD, Role.MEMBER})


@dataclass(frozen=True)
class Actor:
    """Identity performing a request, resolved once at the request boundary."""

    id: str
    role: Role
    email: str | None = None


def check_permission(role: Role | str | None, allowed: frozenset[Role]) -> bool:
    """Return True iff ``role`` is one of ``allowed``."""
    if role is None:
        return False
    try:
        return Role(role) in allowed
    except ValueError:
        return False


def require_actor(actor: Actor | None) -> Actor:
    """Return ``actor`` or raise when the request is anonymous."""
    if actor is None:
        raise UnauthenticatedError()
    return actor


def require_role(actor: Actor | None, allowed: frozenset[Role]) -> Actor:
    """Return ``actor`` if it holds one of ``allowed`` roles.

    Raises:
        UnauthenticatedError: No actor was resolved.
        ForbiddenError: The actor's role is not in ``allowed``.
    """
    resolved = require_actor(actor)
    if not check_permission(resolved.role, allowed):
        raise ForbiddenError()
    return resolved
