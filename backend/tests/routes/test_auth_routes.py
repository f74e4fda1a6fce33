"""
Route tests for /api/v1/auth.
"""

from app.auth import create_access_token


def test_register_returns_token_and_user(client):
    response = client.post(
        "/api/v1/auth/register",
        json={
            "name": "Jordan Lee",
            "email": "Jordan.Lee@Example.com",
            "password": "secret123",
            "role": "trainer",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["access_token"]
    assert body["user"]["email"] == "jordan.lee@example.com"
    assert body["user"]["role"] == "trainer"
    assert "hashed_password" not in body["user"]


def test_register_duplicate_email_conflicts(client, test_client_user):
    response = client.post(
        "/api/v1/auth/register",
        json={"name": "Casey", "email": test_client_user.email, "password": "secret123"},
    )

    assert response.status_code == 409
    body = response.json()
    assert body["detail"] == "User already exists"
    assert body["code"] == "EMAIL_TAKEN"


def test_register_cannot_self_assign_admin(client):
    response = client.post(
        "/api/v1/auth/register",
        json={"name": "Mallory", "email": "mallory@example.com", "password": "secret123", "role": "admin"},
    )

    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


def test_register_short_password(client):
    response = client.post(
        "/api/v1/auth/register",
        json={"name": "Short", "email": "short@example.com", "password": "12345"},
    )
    assert response.status_code == 422


def test_login_updates_last_login(client, test_client_user, test_password):
    assert test_client_user.last_login is None

    response = client.post(
        "/api/v1/auth/login",
        json={"email": test_client_user.email, "password": test_password},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["id"] == test_client_user.id
    assert body["user"]["last_login"] is not None


def test_login_wrong_password(client, test_client_user):
    response = client.post(
        "/api/v1/auth/login",
        json={"email": test_client_user.email, "password": "not-the-password"},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_login_inactive_account(client, db, test_client_user, test_password):
    test_client_user.is_active = False
    db.commit()

    response = client.post(
        "/api/v1/auth/login",
        json={"email": test_client_user.email, "password": test_password},
    )

    assert response.status_code == 401


def test_me(client, test_client_user, auth_headers_client):
    response = client.get("/api/v1/auth/me", headers=auth_headers_client)

    assert response.status_code == 200
    body = response.json()
    assert body["email"] == test_client_user.email
    assert body["preferences"] == {"notifications": True, "email_updates": True}


def test_me_accepts_legacy_header(client, test_client_user):
    token = create_access_token(data={"sub": test_client_user.email})

    response = client.get("/api/v1/auth/me", headers={"x-auth-token": token})

    assert response.status_code == 200


def test_me_without_token(client):
    response = client.get("/api/v1/auth/me")

    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"


def test_me_with_garbage_token(client):
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Could not validate credentials"


def test_me_for_deactivated_user(client, db, test_client_user, auth_headers_client):
    test_client_user.is_active = False
    db.commit()

    response = client.get("/api/v1/auth/me", headers=auth_headers_client)

    assert response.status_code == 401
    assert response.json()["detail"] == "Inactive user"
