# tests/domains/test_usr_n.py

"""
Integration tests for the 'usr' domain (authentication and users).

- `POST /usr/auth/token`, `GET /usr/auth/me`
- `POST /usr/users`, `GET /usr/users`, `GET /usr/users/{id}`
- role matrix checks for user management
"""

import pytest
from httpx import AsyncClient

from app.core.security import RoleAuthorizer, get_password_hash, verify_password
from app.core.exceptions import ForbiddenError
from app.domains.usr import models as usr_models


# --- Password hashing ---
def test_password_hash_roundtrip():
    """
    Hashes verify against the original password only.
    """
    hashed = get_password_hash("cellarpass123")
    assert hashed != "cellarpass123"
    assert verify_password("cellarpass123", hashed)
    assert not verify_password("wrongpass", hashed)


# --- Authentication ---
@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, test_admin_user: usr_models.User):
    """
    Correct credentials return a bearer token.
    """
    print("\n--- Running test_login_success ---")
    response = await client.post("/api/v1/usr/auth/token", data={"username": "sysadm", "password": "sysadmpass123"})
    print(f"Response status code: {response.status_code}")

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["access_token"]
    print("test_login_success passed.")


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_admin_user: usr_models.User):
    """
    Wrong password answers 401.
    """
    print("\n--- Running test_login_wrong_password ---")
    response = await client.post("/api/v1/usr/auth/token", data={"username": "sysadm", "password": "nope"})
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 401
    assert response.json()["detail"] == "Incorrect username or password"
    print("test_login_wrong_password passed.")


@pytest.mark.asyncio
async def test_login_inactive_user(client: AsyncClient, user_factory):
    """
    A disabled account cannot log in.
    """
    print("\n--- Running test_login_inactive_user ---")
    await user_factory("retired", "retiredpass123", role=usr_models.UserRole.OPERATOR, is_active=False)
    response = await client.post("/api/v1/usr/auth/token", data={"username": "retired", "password": "retiredpass123"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Inactive user"
    print("test_login_inactive_user passed.")


@pytest.mark.asyncio
async def test_token_resolves_current_user(client: AsyncClient, test_viewer_user: usr_models.User):
    """
    A token obtained from /auth/token is accepted by /auth/me without overrides.
    """
    print("\n--- Running test_token_resolves_current_user ---")
    login = await client.post("/api/v1/usr/auth/token", data={"username": "viewer", "password": "viewerpass123"})
    token = login.json()["access_token"]

    response = await client.get("/api/v1/usr/auth/me", headers={"Authorization": f"Bearer {token}"})
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 200
    assert response.json()["username"] == "viewer"
    assert response.json()["role"] == usr_models.UserRole.VIEWER
    assert "password_hash" not in response.json()
    print("test_token_resolves_current_user passed.")


@pytest.mark.asyncio
async def test_invalid_token_rejected(client: AsyncClient):
    """
    A malformed token answers 401.
    """
    response = await client.get("/api/v1/usr/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Could not validate credentials"


# --- Users ---
@pytest.mark.asyncio
async def test_create_user_admin(admin_client: AsyncClient):
    """
    ADMIN creates a user; the password is hashed and not returned.
    """
    print("\n--- Running test_create_user_admin ---")
    payload = {
        "username": "pressman",
        "password": "pressmanpass123",
        "email": "pressman@example.com",
        "full_name": "Press Operator",
        "role": usr_models.UserRole.OPERATOR,
    }
    response = await admin_client.post("/api/v1/usr/users", json=payload)
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 201
    created = response.json()
    assert created["username"] == "pressman"
    assert created["role"] == usr_models.UserRole.OPERATOR
    assert "password" not in created
    assert "password_hash" not in created
    print("test_create_user_admin passed.")


@pytest.mark.asyncio
async def test_create_user_duplicate_username(admin_client: AsyncClient, test_operator_user: usr_models.User):
    """
    An existing username answers 409.
    """
    payload = {"username": "operator", "password": "anotherpass123", "email": "other@example.com"}
    response = await admin_client.post("/api/v1/usr/users", json=payload)

    assert response.status_code == 409
    assert response.json()["detail"] == "Username already registered"


@pytest.mark.asyncio
async def test_create_user_operator_forbidden(operator_client: AsyncClient):
    """
    OPERATOR may not create users.
    """
    payload = {"username": "sneaky", "password": "sneakypass123"}
    response = await operator_client.post("/api/v1/usr/users", json=payload)

    assert response.status_code == 403
    assert response.json()["detail"] == "Not enough permissions to create user."


@pytest.mark.asyncio
async def test_list_and_read_users_viewer(viewer_client: AsyncClient, test_viewer_user: usr_models.User):
    """
    VIEWER can list and read users; an unknown id answers 404.
    """
    print("\n--- Running test_list_and_read_users_viewer ---")
    response = await viewer_client.get("/api/v1/usr/users")
    assert response.status_code == 200
    assert "viewer" in [u["username"] for u in response.json()]

    response = await viewer_client.get(f"/api/v1/usr/users/{test_viewer_user.id}")
    assert response.status_code == 200
    assert response.json()["email"] == "viewer@example.com"

    response = await viewer_client.get("/api/v1/usr/users/99999")
    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"
    print("test_list_and_read_users_viewer passed.")


# --- Role matrix ---
def test_role_authorizer_matrix():
    """
    Spot checks of the fixed role x resource x action matrix.
    """
    authorizer = RoleAuthorizer()
    admin = usr_models.User(username="a", password_hash="x", role=usr_models.UserRole.ADMIN)
    operator = usr_models.User(username="o", password_hash="x", role=usr_models.UserRole.OPERATOR)
    viewer = usr_models.User(username="v", password_hash="x", role=usr_models.UserRole.VIEWER)
    disabled = usr_models.User(username="d", password_hash="x", role=usr_models.UserRole.ADMIN, is_active=False)

    assert authorizer.is_allowed(admin, "delete", "vendor")
    assert authorizer.is_allowed(operator, "update", "vendor")
    assert not authorizer.is_allowed(operator, "delete", "vendor")
    assert authorizer.is_allowed(viewer, "list", "vendor")
    assert not authorizer.is_allowed(viewer, "update", "vendor")
    assert not authorizer.is_allowed(admin, "delete", "audit_log")
    assert not authorizer.is_allowed(disabled, "read", "vendor")
    assert not authorizer.is_allowed(admin, "read", "unknown_resource")

    with pytest.raises(ForbiddenError) as exc_info:
        authorizer.ensure_allowed(viewer, "update", "vendor")
    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "Not enough permissions to update vendor."
