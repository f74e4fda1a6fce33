"""
Route tests for /api/v1/admin.
"""

import pytest


@pytest.mark.parametrize(
    "path",
    ["/api/v1/admin/users", "/api/v1/admin/trainers", "/api/v1/admin/sessions", "/api/v1/admin/bookings"],
)
def test_admin_listings_require_admin(client, auth_headers_client, path):
    assert client.get(path, headers=auth_headers_client).status_code == 403
    assert client.get(path).status_code == 401


def test_list_users_filters(client, test_client_user, test_other_user, test_trainer, auth_headers_admin):
    response = client.get("/api/v1/admin/users", headers=auth_headers_admin, params={"role": "trainer"})
    body = response.json()
    assert response.status_code == 200
    assert body["total"] == 1
    assert body["items"][0]["id"] == test_trainer.id

    response = client.get("/api/v1/admin/users", headers=auth_headers_admin, params={"search": "robin"})
    assert [u["id"] for u in response.json()["items"]] == [test_other_user.id]

    response = client.get("/api/v1/admin/users", headers=auth_headers_admin, params={"limit": 2})
    body = response.json()
    assert body["total"] == 4
    assert len(body["items"]) == 2
    assert body["has_next"] is True


def test_deactivate_and_reactivate_user(client, test_client_user, auth_headers_admin, auth_headers_client):
    url = f"/api/v1/admin/users/{test_client_user.id}/status"

    response = client.put(url, headers=auth_headers_admin, json={"is_active": False})
    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert client.get("/api/v1/auth/me", headers=auth_headers_client).status_code == 401

    client.put(url, headers=auth_headers_admin, json={"is_active": True})
    assert client.get("/api/v1/auth/me", headers=auth_headers_client).status_code == 200


def test_admin_cannot_deactivate_self(client, test_admin, auth_headers_admin):
    response = client.put(
        f"/api/v1/admin/users/{test_admin.id}/status",
        headers=auth_headers_admin,
        json={"is_active": False},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot change your own status"


def test_set_role(client, test_client_user, auth_headers_admin):
    response = client.put(
        f"/api/v1/admin/users/{test_client_user.id}/role",
        headers=auth_headers_admin,
        json={"role": "admin"},
    )

    assert response.status_code == 200
    assert response.json()["role"] == "admin"


def test_verify_trainer(client, test_trainer_profile, auth_headers_admin):
    listing = client.get("/api/v1/admin/trainers", headers=auth_headers_admin, params={"is_verified": False})
    assert listing.json()["total"] == 1

    response = client.put(
        f"/api/v1/admin/trainers/{test_trainer_profile.id}/verify",
        headers=auth_headers_admin,
        json={"is_verified": True, "notes": "Certificates checked"},
    )

    assert response.status_code == 200
    assert response.json()["is_verified"] is True
    listing = client.get("/api/v1/admin/trainers", headers=auth_headers_admin, params={"is_verified": True})
    assert listing.json()["total"] == 1


def test_verify_unknown_trainer(client, auth_headers_admin):
    response = client.put(
        "/api/v1/admin/trainers/01J0000000000000000000000Z/verify",
        headers=auth_headers_admin,
        json={"is_verified": True},
    )
    assert response.status_code == 404


def test_list_sessions_and_bookings(client, test_trainer_profile, auth_headers_client, auth_headers_admin, slot_at):
    client.post(
        "/api/v1/sessions",
        headers=auth_headers_client,
        json={
            "trainer_id": test_trainer_profile.user_id,
            "session_type": "virtual",
            "duration": 60,
            "starts_at": slot_at(1).isoformat(),
        },
    )
    client.post(
        "/api/v1/bookings",
        headers=auth_headers_client,
        json={
            "trainer_id": test_trainer_profile.id,
            "sessions": [{"service_name": "Personal Training", "duration": 60, "starts_at": slot_at(2).isoformat()}],
            "payment_method": "paypal",
        },
    )

    sessions = client.get("/api/v1/admin/sessions", headers=auth_headers_admin, params={"status": "scheduled"})
    assert sessions.status_code == 200
    assert sessions.json()["total"] == 1

    bookings = client.get(
        "/api/v1/admin/bookings",
        headers=auth_headers_admin,
        params={"status": "pending", "payment_status": "pending"},
    )
    assert bookings.status_code == 200
    assert bookings.json()["total"] == 1

    paid = client.get("/api/v1/admin/bookings", headers=auth_headers_admin, params={"payment_status": "paid"})
    assert paid.json()["total"] == 0
