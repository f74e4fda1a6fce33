"""
Route tests for /api/v1/trainers.
"""

from decimal import Decimal

from app.models.trainer import TrainerProfile, TrainerService


def _profile_payload(availability, **overrides):
    payload = {
        "specialization": "Yoga & Flexibility",
        "experience": {"years": 3, "description": "Hatha and vinyasa"},
        "services": [
            {"name": "Morning Flow", "duration": 60, "price": "45.00"},
            {"name": "Private Session", "duration": 60, "price": "80.00"},
        ],
        "availability": availability,
        "location": {"city": "Denver", "state": "CO", "latitude": 39.7392, "longitude": -104.9903},
        "tags": ["yoga", "mobility"],
    }
    payload.update(overrides)
    return payload


def _add_profile(db, user, *, specialization, city, price, rating=0.0, years=1, lat=None, lon=None):
    profile = TrainerProfile(
        user_id=user.id,
        specialization=specialization,
        experience_years=years,
        availability={"monday": {"start": "09:00", "end": "17:00", "available": True}},
        city=city,
        latitude=lat,
        longitude=lon,
        rating_average=rating,
        social_media={},
        tags=[],
    )
    profile.services = [TrainerService(name="Session", duration=60, price=Decimal(price), position=0)]
    db.add(profile)
    db.commit()
    return profile


def test_search_returns_paginated_envelope(client, test_trainer_profile):
    response = client.get("/api/v1/trainers")

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert body["page"] == 1
    assert body["has_prev"] is False
    assert body["has_next"] is False
    item = body["items"][0]
    assert item["id"] == test_trainer_profile.id
    assert item["name"] == "Taylor Trainer"
    assert [s["name"] for s in item["services"]] == ["Personal Training", "Yoga Flow"]


def test_search_filters_and_sorting(client, db, test_trainer_profile, test_client_user, test_other_user):
    test_client_user.role = "trainer"
    test_other_user.role = "trainer"
    db.commit()
    _add_profile(db, test_client_user, specialization="Yoga", city="Boston", price="40.00", rating=4.8, years=2)
    _add_profile(db, test_other_user, specialization="Power Yoga", city="Austin", price="120.00", rating=3.9, years=9)

    response = client.get("/api/v1/trainers", params={"specialization": "yoga"})
    assert response.json()["total"] == 2

    response = client.get("/api/v1/trainers", params={"location": "aust"})
    assert response.json()["total"] == 2

    response = client.get("/api/v1/trainers", params={"experience": 5})
    assert response.json()["total"] == 2

    response = client.get("/api/v1/trainers", params={"sort_by": "price", "sort_order": "asc"})
    prices = [item["min_price"] for item in response.json()["items"]]
    assert prices == sorted(prices, key=float)

    response = client.get("/api/v1/trainers", params={"limit": 1, "page": 2})
    body = response.json()
    assert len(body["items"]) == 1
    assert body["has_next"] is True
    assert body["has_prev"] is True


def test_search_hides_inactive_profiles(client, db, test_trainer_profile):
    test_trainer_profile.is_active = False
    db.commit()

    assert client.get("/api/v1/trainers").json()["total"] == 0
    assert client.get(f"/api/v1/trainers/{test_trainer_profile.id}").status_code == 404


def test_nearby_search(client, db, test_trainer_profile, test_client_user):
    test_client_user.role = "trainer"
    db.commit()
    # Dallas is roughly 300 km from Austin
    _add_profile(db, test_client_user, specialization="Pilates", city="Dallas", price="50.00", lat=32.7767, lon=-96.7970)

    response = client.get(
        "/api/v1/trainers/search/nearby",
        params={"latitude": 30.2672, "longitude": -97.7431, "radius": 25},
    )

    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == [test_trainer_profile.id]

    response = client.get(
        "/api/v1/trainers/search/nearby",
        params={"latitude": 30.2672, "longitude": -97.7431, "radius": 500},
    )
    assert len(response.json()) == 2


def test_get_public_profile(client, test_trainer_profile):
    response = client.get(f"/api/v1/trainers/{test_trainer_profile.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["specialization"] == "Strength Training"
    assert body["location"]["city"] == "Austin"


def test_get_unknown_profile(client):
    assert client.get("/api/v1/trainers/01J0000000000000000000000Z").status_code == 404


def test_create_profile(client, test_trainer, auth_headers_trainer, availability_factory):
    response = client.post(
        "/api/v1/trainers",
        headers=auth_headers_trainer,
        json=_profile_payload(availability_factory()),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["user_id"] == test_trainer.id
    assert body["experience_years"] == 3
    assert [s["name"] for s in body["services"]] == ["Morning Flow", "Private Session"]
    assert body["rating_average"] == 0
    assert body["is_verified"] is False


def test_create_profile_requires_trainer_role(client, test_client_user, auth_headers_client, availability_factory):
    response = client.post(
        "/api/v1/trainers",
        headers=auth_headers_client,
        json=_profile_payload(availability_factory()),
    )
    assert response.status_code == 403


def test_create_profile_twice(client, test_trainer_profile, auth_headers_trainer, availability_factory):
    response = client.post(
        "/api/v1/trainers",
        headers=auth_headers_trainer,
        json=_profile_payload(availability_factory()),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Trainer profile already exists"


def test_create_profile_unknown_specialization(client, test_trainer, auth_headers_trainer, availability_factory):
    response = client.post(
        "/api/v1/trainers",
        headers=auth_headers_trainer,
        json=_profile_payload(availability_factory(), specialization="Underwater Chess"),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid specialization"


def test_create_profile_without_available_days(client, test_trainer, auth_headers_trainer):
    availability = {"monday": {"available": False}, "tuesday": {"available": False}}

    response = client.post(
        "/api/v1/trainers",
        headers=auth_headers_trainer,
        json=_profile_payload(availability),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "At least one day must be available"


def test_create_profile_missing_hours(client, test_trainer, auth_headers_trainer):
    availability = {"friday": {"start": "09:00", "available": True}}

    response = client.post(
        "/api/v1/trainers",
        headers=auth_headers_trainer,
        json=_profile_payload(availability),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "End time is required for friday"


def test_upsert_own_profile_creates_then_updates(client, test_trainer, auth_headers_trainer, availability_factory):
    url = f"/api/v1/trainers/user/{test_trainer.id}"

    created = client.put(url, headers=auth_headers_trainer, json=_profile_payload(availability_factory()))
    assert created.status_code == 201

    updated = client.put(
        url,
        headers=auth_headers_trainer,
        json=_profile_payload(availability_factory(), specialization="CrossFit"),
    )
    assert updated.status_code == 200
    assert updated.json()["id"] == created.json()["id"]
    assert updated.json()["specialization"] == "CrossFit"

    own = client.get(url, headers=auth_headers_trainer)
    assert own.status_code == 200
    assert own.json()["specialization"] == "CrossFit"


def test_own_profile_of_someone_else(client, test_trainer_profile, test_client_user, auth_headers_client):
    response = client.get(f"/api/v1/trainers/user/{test_trainer_profile.user_id}", headers=auth_headers_client)
    assert response.status_code == 403


def test_update_profile_owner_only(client, test_trainer_profile, auth_headers_trainer, test_client_user, auth_headers_client):
    url = f"/api/v1/trainers/{test_trainer_profile.id}"

    denied = client.put(url, headers=auth_headers_client, json={"tags": ["nope"]})
    assert denied.status_code == 403

    response = client.put(
        url,
        headers=auth_headers_trainer,
        json={"services": [{"name": "Bootcamp", "duration": 45, "price": "30.00"}], "tags": ["hiit"]},
    )
    assert response.status_code == 200
    body = response.json()
    assert [s["name"] for s in body["services"]] == ["Bootcamp"]
    assert body["tags"] == ["hiit"]
    # Untouched fields survive a partial update
    assert body["specialization"] == "Strength Training"


def test_reviews_update_average(client, test_trainer_profile, auth_headers_client, auth_headers_other):
    url = f"/api/v1/trainers/{test_trainer_profile.id}/reviews"

    first = client.post(url, headers=auth_headers_client, json={"rating": 5, "comment": "Great coach"})
    assert first.status_code == 201
    assert first.json()["rating_average"] == 5
    assert first.json()["rating_count"] == 1

    second = client.post(url, headers=auth_headers_other, json={"rating": 2, "comment": "Too intense"})
    assert second.status_code == 201
    assert second.json()["rating_average"] == 3.5
    assert second.json()["rating_count"] == 2


def test_duplicate_review(client, test_trainer_profile, auth_headers_client):
    url = f"/api/v1/trainers/{test_trainer_profile.id}/reviews"
    client.post(url, headers=auth_headers_client, json={"rating": 4, "comment": "Solid"})

    response = client.post(url, headers=auth_headers_client, json={"rating": 1, "comment": "Changed my mind"})

    assert response.status_code == 400
    assert response.json()["detail"] == "You have already reviewed this trainer"


def test_review_rating_bounds(client, test_trainer_profile, auth_headers_client):
    response = client.post(
        f"/api/v1/trainers/{test_trainer_profile.id}/reviews",
        headers=auth_headers_client,
        json={"rating": 6, "comment": "Off the charts"},
    )
    assert response.status_code == 422
