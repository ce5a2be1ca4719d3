# tests/test_roles.py
"""Tests for the permission gate."""

import pytest

from campus_board.core.errors import ForbiddenError, UnauthenticatedError
from campus_board.core.roles import (
    CAN_COMMENT,
    CAN_MANAGE_TOPICS,
    CAN_MODERATE,
    CAN_PUBLISH_NEWS,
    Actor,
    Role,
    check_permission,
    require_actor,
    require_role,
)


@pytest.mark.parametrize(
    ("role", "expected"),
    [(Role.ADMIN, True), (Role.MOD, True), (Role.MEMBER, False)],
)
def test_check_permission_moderation(role: Role, expected: bool) -> None:
    assert check_permission(role, CAN_MODERATE) is expected
    assert check_permission(role, CAN_MANAGE_TOPICS) is expected
    assert check_permission(role, CAN_PUBLISH_NEWS) is expected


def test_every_role_can_comment() -> None:
    assert all(check_permission(role, CAN_COMMENT) for role in Role)


def test_check_permission_accepts_raw_strings() -> None:
    assert check_permission("MOD", CAN_MODERATE)
    assert not check_permission("SUPERUSER", CAN_MODERATE)
    assert not check_permission(None, CAN_MODERATE)


def test_require_actor_rejects_anonymous() -> None:
    with pytest.raises(UnauthenticatedError) as exc_info:
        require_actor(None)
    assert exc_info.value.status_code == 401


def test_require_role_distinguishes_forbidden_from_unauthenticated() -> None:
    member = Actor(id="m-1", role=Role.MEMBER)
    with pytest.raises(ForbiddenError) as exc_info:
        require_role(member, CAN_MODERATE)
    assert exc_info.value.status_code == 403

    with pytest.raises(UnauthenticatedError):
        require_role(None, CAN_MODERATE)


def test_require_role_returns_actor() -> None:
    mod = Actor(id="mod-1", role=Role.MOD)
    assert require_role(mod, CAN_MODERATE) is mod
