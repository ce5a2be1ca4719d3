# tests/v1/test_auth_api.py
"""Tests for identity resolution endpoints."""

from fastapi import status

from campus_board.core.security import create_access_token


def test_whoami_anonymous(client) -> None:
    response = client.get("/api/v1/whoami")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] is None


def test_whoami_resolves_role(client, mod_profile, mod_headers) -> None:
    response = client.get("/api/v1/whoami", headers=mod_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == mod_profile.id
    assert data["role"] == "MOD"
    assert data["email"] == mod_profile.email


def test_whoami_with_garbage_token(client) -> None:
    response = client.get("/api/v1/whoami", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] is None


def test_whoami_with_unknown_profile(client) -> None:
    token = create_access_token("00000000-0000-0000-0000-000000000000")
    response = client.get("/api/v1/whoami", headers={"Authorization": f"Bearer {token}"})
    assert response.json()["id"] is None


def test_profile_requires_auth(client) -> None:
    response = client.get("/api/v1/profile")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Authentication required"}


def test_profile_returns_own_profile(client, member_profile, member_headers) -> None:
    response = client.get("/api/v1/profile", headers=member_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == member_profile.id
    assert data["display_name"] == "Member"
    assert data["role"] == "MEMBER"
