"""
Route tests for /api/v1/users.
"""


def test_list_users_admin_only(client, test_client_user, auth_headers_client):
    response = client.get("/api/v1/users", headers=auth_headers_client)
    assert response.status_code == 403


def test_list_users_newest_first(client, test_client_user, test_other_user, auth_headers_admin):
    response = client.get("/api/v1/users", headers=auth_headers_admin)

    assert response.status_code == 200
    emails = {user["email"] for user in response.json()}
    assert {test_client_user.email, test_other_user.email} <= emails


def test_get_own_account(client, test_client_user, auth_headers_client):
    response = client.get(f"/api/v1/users/{test_client_user.id}", headers=auth_headers_client)

    assert response.status_code == 200
    assert response.json()["id"] == test_client_user.id


def test_get_other_account_denied(client, test_other_user, auth_headers_client):
    response = client.get(f"/api/v1/users/{test_other_user.id}", headers=auth_headers_client)
    assert response.status_code == 403


def test_admin_gets_any_account(client, test_client_user, auth_headers_admin):
    response = client.get(f"/api/v1/users/{test_client_user.id}", headers=auth_headers_admin)
    assert response.status_code == 200


def test_get_missing_account(client, auth_headers_admin):
    response = client.get("/api/v1/users/01J0000000000000000000000Z", headers=auth_headers_admin)
    assert response.status_code == 404


def test_update_profile_and_preferences(client, test_client_user, auth_headers_client):
    response = client.put(
        f"/api/v1/users/{test_client_user.id}",
        headers=auth_headers_client,
        json={"bio": "Marathon runner", "preferences": {"notifications": False}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["bio"] == "Marathon runner"
    assert body["preferences"] == {"notifications": False, "email_updates": True}


def test_update_with_taken_email(client, test_client_user, test_other_user, auth_headers_client):
    response = client.put(
        f"/api/v1/users/{test_client_user.id}",
        headers=auth_headers_client,
        json={"email": test_other_user.email},
    )
    assert response.status_code == 409


def test_update_rejects_unknown_fields(client, test_client_user, auth_headers_client):
    response = client.put(
        f"/api/v1/users/{test_client_user.id}",
        headers=auth_headers_client,
        json={"role": "admin"},
    )
    assert response.status_code == 422


def test_deactivate_own_account(client, test_client_user, auth_headers_client):
    response = client.delete(f"/api/v1/users/{test_client_user.id}", headers=auth_headers_client)

    assert response.status_code == 200
    assert response.json()["success"] is True

    # The token keeps decoding but the account is no longer usable
    assert client.get("/api/v1/auth/me", headers=auth_headers_client).status_code == 401


def test_change_role(client, test_client_user, auth_headers_admin):
    response = client.put(
        f"/api/v1/users/{test_client_user.id}/role",
        headers=auth_headers_admin,
        json={"role": "trainer"},
    )

    assert response.status_code == 200
    assert response.json()["role"] == "trainer"


def test_admin_cannot_change_own_role(client, test_admin, auth_headers_admin):
    response = client.put(
        f"/api/v1/users/{test_admin.id}/role",
        headers=auth_headers_admin,
        json={"role": "user"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot change your own role"


def test_non_admin_cannot_change_role(client, test_other_user, auth_headers_client):
    response = client.put(
        f"/api/v1/users/{test_other_user.id}/role",
        headers=auth_headers_client,
        json={"role": "admin"},
    )
    assert response.status_code == 403
