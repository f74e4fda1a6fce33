"""
Route tests for /api/v1/bookings.
"""

from datetime import timedelta

import pytest

from app.models.booking import Booking


@pytest.fixture
def create_booking(client, test_trainer_profile, auth_headers_client):
    def _create(starts, *, trainer_id=None, service_name="Personal Training", duration=60, headers=None):
        payload = {
            "trainer_id": trainer_id or test_trainer_profile.id,
            "booking_type": "package" if len(starts) > 1 else "single",
            "sessions": [
                {
                    "service_name": service_name,
                    "session_type": "in-person",
                    "duration": duration,
                    "starts_at": start.isoformat(),
                }
                for start in starts
            ],
            "payment_method": "cash",
        }
        return client.post("/api/v1/bookings", headers=headers or auth_headers_client, json=payload)

    return _create


def _set_status(client, booking_id, headers, status):
    return client.put(f"/api/v1/bookings/{booking_id}/status", headers=headers, json={"status": status})


def test_create_booking_prices_each_line(create_booking, test_client_user, test_trainer, slot_at):
    response = create_booking([slot_at(1), slot_at(3)], duration=90, service_name="yoga")

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["payment_status"] == "pending"
    assert body["client_id"] == test_client_user.id
    assert body["trainer_id"] == test_trainer.id
    assert [line["price"] for line in body["sessions"]] == [135.0, 135.0]
    assert body["total_price"] == 270.0
    assert body["total_sessions"] == 2
    assert body["total_duration_hours"] == 3.0
    assert body["average_price_per_session"] == 135.0
    assert body["can_be_cancelled"] is True
    assert body["refund_amount"] == 270.0
    assert all(line["session_id"] is None for line in body["sessions"])
    assert [h["status"] for h in body["status_history"]] == ["pending"]


def test_create_booking_by_trainer_user_id(create_booking, test_trainer, slot_at):
    response = create_booking([slot_at(1)], trainer_id=test_trainer.id)

    assert response.status_code == 201
    assert response.json()["trainer_id"] == test_trainer.id


def test_create_booking_requires_auth(client, test_trainer_profile, slot_at):
    response = client.post(
        "/api/v1/bookings",
        json={
            "trainer_id": test_trainer_profile.id,
            "sessions": [{"service_name": "x", "duration": 60, "starts_at": slot_at(1).isoformat()}],
            "payment_method": "cash",
        },
    )
    assert response.status_code == 401


def test_create_booking_for_trainer_without_services(db, create_booking, test_trainer_profile, slot_at):
    test_trainer_profile.services = []
    db.commit()

    response = create_booking([slot_at(1)])

    assert response.status_code == 400
    assert response.json()["code"] == "NO_SERVICES_AVAILABLE"


def test_create_booking_in_the_past(create_booking, slot_at):
    response = create_booking([slot_at(1) - timedelta(days=30)])
    assert response.status_code == 400


def test_create_booking_rejects_client_prices(client, test_trainer_profile, auth_headers_client, slot_at):
    response = client.post(
        "/api/v1/bookings",
        headers=auth_headers_client,
        json={
            "trainer_id": test_trainer_profile.id,
            "sessions": [
                {"service_name": "x", "duration": 60, "starts_at": slot_at(1).isoformat(), "price": 1}
            ],
            "payment_method": "cash",
        },
    )
    assert response.status_code == 422


def test_confirm_materializes_sessions(client, create_booking, auth_headers_trainer, auth_headers_client, slot_at):
    booking_id = create_booking([slot_at(1), slot_at(2)]).json()["id"]

    response = _set_status(client, booking_id, auth_headers_trainer, "confirmed")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "confirmed"
    session_ids = [line["session_id"] for line in body["sessions"]]
    assert all(session_ids)

    sessions = client.get("/api/v1/sessions", headers=auth_headers_client).json()
    assert sorted(s["id"] for s in sessions) == sorted(session_ids)
    assert all(s["price_amount"] == 60.0 for s in sessions)


def test_confirm_with_conflict_keeps_booking_pending(client, create_booking, test_trainer_profile, auth_headers_other, auth_headers_trainer, slot_at):
    start = slot_at(2)
    booking_id = create_booking([slot_at(1), start]).json()["id"]

    # Someone else takes the second slot directly
    taken = client.post(
        "/api/v1/sessions",
        headers=auth_headers_other,
        json={
            "trainer_id": test_trainer_profile.user_id,
            "session_type": "virtual",
            "duration": 60,
            "starts_at": (start + timedelta(minutes=15)).isoformat(),
        },
    )
    assert taken.status_code == 201

    response = _set_status(client, booking_id, auth_headers_trainer, "confirmed")

    assert response.status_code == 409
    assert response.json()["code"] == "BOOKING_CONFLICT"

    booking = client.get(f"/api/v1/bookings/{booking_id}", headers=auth_headers_trainer).json()
    assert booking["status"] == "pending"
    assert all(line["session_id"] is None for line in booking["sessions"])
    assert len(client.get("/api/v1/sessions", headers=auth_headers_trainer).json()) == 1


def test_booking_items_conflict_with_each_other(client, create_booking, auth_headers_trainer, slot_at):
    start = slot_at(2)
    booking_id = create_booking([start, start + timedelta(minutes=30)]).json()["id"]

    response = _set_status(client, booking_id, auth_headers_trainer, "confirmed")

    assert response.status_code == 409


def test_cancel_cascades_to_sessions(client, create_booking, auth_headers_client, auth_headers_trainer, slot_at):
    booking_id = create_booking([slot_at(1), slot_at(2)]).json()["id"]
    confirmed = _set_status(client, booking_id, auth_headers_trainer, "confirmed").json()

    response = client.delete(f"/api/v1/bookings/{booking_id}", headers=auth_headers_client)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Booking cancelled successfully"
    assert body["data"]["status"] == "cancelled"
    assert body["data"]["refund_amount"] == 120.0

    for line in confirmed["sessions"]:
        session = client.get(f"/api/v1/sessions/{line['session_id']}", headers=auth_headers_client).json()
        assert session["status"] == "cancelled"
        assert session["status_history"][-1]["notes"] == "Cancelled due to booking cancellation"


def test_cancel_inside_policy_window_refunds_nothing(client, db, create_booking, auth_headers_client, slot_at):
    booking_id = create_booking([slot_at(1)]).json()["id"]
    # Tighten the policy so that next week's session is already inside it
    booking = db.get(Booking, booking_id)
    booking.cancellation_hours_before = 24 * 30
    db.commit()

    response = client.delete(f"/api/v1/bookings/{booking_id}", headers=auth_headers_client)

    assert response.status_code == 200
    assert response.json()["data"]["refund_amount"] == 0.0


def test_cancel_completed_booking(client, create_booking, auth_headers_client, auth_headers_trainer, slot_at):
    booking_id = create_booking([slot_at(1)]).json()["id"]
    _set_status(client, booking_id, auth_headers_trainer, "completed")

    response = client.delete(f"/api/v1/bookings/{booking_id}", headers=auth_headers_client)

    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot cancel booking in current status"


def test_bookings_visible_to_participants_only(client, create_booking, auth_headers_other, slot_at):
    booking_id = create_booking([slot_at(1)]).json()["id"]

    response = client.get(f"/api/v1/bookings/{booking_id}", headers=auth_headers_other)

    assert response.status_code == 403


def test_list_bookings(client, create_booking, auth_headers_client, auth_headers_trainer, auth_headers_other, slot_at):
    first = create_booking([slot_at(1)]).json()["id"]
    create_booking([slot_at(2)])
    _set_status(client, first, auth_headers_trainer, "confirmed")

    mine = client.get("/api/v1/bookings", headers=auth_headers_client).json()
    assert mine["total"] == 2

    as_trainer = client.get("/api/v1/bookings", headers=auth_headers_trainer, params={"status": "confirmed"}).json()
    assert [b["id"] for b in as_trainer["items"]] == [first]

    assert client.get("/api/v1/bookings", headers=auth_headers_other).json()["total"] == 0


def test_public_trainer_bookings(client, create_booking, test_trainer, slot_at):
    create_booking([slot_at(1)])

    response = client.get(f"/api/v1/bookings/trainer/{test_trainer.id}")

    assert response.status_code == 200
    assert response.json()["total"] == 1


def test_payment_updates_are_recorded(
    client, create_booking, auth_headers_client, auth_headers_trainer, test_client_user, test_trainer, slot_at
):
    booking_id = create_booking([slot_at(1)]).json()["id"]

    response = client.put(
        f"/api/v1/bookings/{booking_id}/payment",
        headers=auth_headers_client,
        json={"payment_status": "paid", "transaction_id": "txn_123", "payment_method": "credit_card"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["payment_status"] == "paid"
    assert body["transaction_id"] == "txn_123"
    assert body["payment_method"] == "credit_card"
    assert [p["status"] for p in body["payment_history"]] == ["pending", "paid"]

    # A later change without a transaction id keeps the one already on file
    response = client.put(
        f"/api/v1/bookings/{booking_id}/payment",
        headers=auth_headers_trainer,
        json={"payment_status": "refunded"},
    )

    assert response.status_code == 200
    history = response.json()["payment_history"]
    assert [p["status"] for p in history] == ["pending", "paid", "refunded"]
    assert [p["updated_by_id"] for p in history] == [
        test_client_user.id,
        test_client_user.id,
        test_trainer.id,
    ]
    assert [p["transaction_id"] for p in history] == [None, "txn_123", "txn_123"]
    assert [p["payment_method"] for p in history] == ["cash", "credit_card", "credit_card"]
