"""
Tests for the auth and user management API.

Sign-in sets an HttpOnly session cookie; every admin route answers 401
without it.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse"
ADMIN_NAME = "Site Admin"

ADMIN_ROUTES = [
    ("get", "/api/users"),
    ("get", "/api/admin/posts"),
    ("get", "/api/admin/pages"),
    ("get", "/api/admin/settings"),
    ("get", "/api/admin/analytics"),
    ("get", "/api/admin/stats"),
    ("get", "/api/auth/me"),
]


# --- Access Control ---


class TestAccessControl:
    @pytest.mark.parametrize("method,path", ADMIN_ROUTES)
    def test_requires_session(self, client: TestClient, method: str, path: str) -> None:
        response = getattr(client, method)(path)

        assert response.status_code == 401
        assert response.json()["detail"] == "Not authenticated"

    def test_foreign_bearer_header_rejected(self, client: TestClient) -> None:
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401


# --- Login / Logout ---


class TestLogin:
    def test_json_login_sets_cookie(self, admin_client: TestClient) -> None:
        cookie = admin_client.cookies.get("access_token")
        assert cookie is not None
        assert cookie.strip('"').startswith("Bearer ")

    def test_me(self, admin_client: TestClient) -> None:
        response = admin_client.get("/api/auth/me")

        assert response.status_code == 200
        body = response.json()
        assert body["email"] == ADMIN_EMAIL
        assert body["displayName"] == ADMIN_NAME

    def test_bad_password(self, admin_client: TestClient) -> None:
        admin_client.cookies.clear()

        response = admin_client.post(
            "/api/auth/login", data={"username": ADMIN_EMAIL, "password": "wrong"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    def test_form_login_redirects(self, admin_client: TestClient) -> None:
        admin_client.cookies.clear()

        response = admin_client.post(
            "/api/auth/login",
            data={"username": ADMIN_EMAIL, "password": ADMIN_PASSWORD, "next": "/dashboard"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard"
        assert "access_token" in response.headers["set-cookie"]

    def test_form_login_failure_returns_to_form(self, client: TestClient) -> None:
        response = client.post(
            "/api/auth/login",
            data={"username": "ghost@example.com", "password": "nope", "next": "/dashboard"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard?error=login"

    def test_offsite_next_ignored(self, admin_client: TestClient) -> None:
        admin_client.cookies.clear()

        response = admin_client.post(
            "/api/auth/login",
            data={
                "username": ADMIN_EMAIL,
                "password": ADMIN_PASSWORD,
                "next": "https://evil.example",
            },
            follow_redirects=False,
        )

        assert response.headers["location"] == "/dashboard"

    def test_logout_clears_session(self, admin_client: TestClient) -> None:
        assert admin_client.post("/api/auth/logout").json() == {"status": "success"}
        assert admin_client.get("/api/auth/me").status_code == 401


# --- Users ---


class TestUsers:
    def test_list_includes_admin(self, admin_client: TestClient) -> None:
        response = admin_client.get("/api/users")

        assert response.status_code == 200
        assert [u["email"] for u in response.json()] == [ADMIN_EMAIL]

    def test_create_user(self, admin_client: TestClient) -> None:
        response = admin_client.post(
            "/api/users",
            json={"email": "new@example.com", "password": "secret123", "displayName": "New"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["displayName"] == "New"
        assert body["createdAt"] == "2025-01-15T12:00:00.000000Z"
        assert len(admin_client.get("/api/users").json()) == 2

    def test_create_user_errors(self, admin_client: TestClient) -> None:
        weak = admin_client.post(
            "/api/users", json={"email": "weak@example.com", "password": "123"}
        )
        duplicate = admin_client.post(
            "/api/users", json={"email": ADMIN_EMAIL, "password": "secret123"}
        )

        assert weak.status_code == 400
        assert weak.json()["detail"] == "Password should be at least 6 characters."
        assert duplicate.status_code == 400
        assert duplicate.json()["detail"].startswith("This email is already registered")

    def test_new_user_can_sign_in(self, admin_client: TestClient) -> None:
        admin_client.post(
            "/api/users", json={"email": "new@example.com", "password": "secret123"}
        )
        admin_client.cookies.clear()

        response = admin_client.post(
            "/api/auth/login", data={"username": "new@example.com", "password": "secret123"}
        )

        assert response.status_code == 200

    def test_rename_user(self, admin_client: TestClient) -> None:
        uid = admin_client.get("/api/users").json()[0]["uid"]

        response = admin_client.put(f"/api/users/{uid}", json={"displayName": "Chief"})

        assert response.status_code == 200
        assert response.json()["displayName"] == "Chief"

    def test_rename_missing_user(self, admin_client: TestClient) -> None:
        response = admin_client.put("/api/users/missing", json={"displayName": "X"})
        assert response.status_code == 404
