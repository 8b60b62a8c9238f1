# mypy: ignore-errors
"""Tests for profile endpoints."""

from fastapi import status


def test_me_returns_profile(client, test_user, auth_token) -> None:
    response = client.get("/api/v1/users/me", headers=auth_token)

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["id"] == test_user.id
    assert body["email"] == "test@example.com"
    assert body["credits"] == 10
    assert body["is_admin"] is False
    assert body["badges"] == []


def test_me_lists_granted_badges(client, test_user, auth_token, make_location) -> None:
    for _ in range(10):
        make_location(test_user)

    check = client.post("/api/v1/badges/check", headers=auth_token)
    assert check.json()["new_badges"] == ["locations_10"]

    response = client.get("/api/v1/users/me", headers=auth_token)
    assert response.json()["badges"] == ["locations_10"]
