"""
Route tests for the health check, metrics and root endpoints.
"""

from app.routes.v1 import health


def test_health_check(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"
    assert body["service"] == "trainerlocator-api"
    assert body["timestamp"].endswith("Z")


def test_health_check_database_down(client, monkeypatch):
    monkeypatch.setattr(health, "check_database", lambda db: False)

    response = client.get("/api/v1/health")

    assert response.status_code == 503
    assert response.json()["database"] == "unreachable"


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "message" in response.json()


def test_metrics_endpoint(client):
    client.get("/api/v1/health")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "trainerlocator_http_requests_total" in response.text
    assert "trainerlocator_prometheus_scrapes_total" in response.text


def test_unknown_route_uses_problem_body(client):
    response = client.get("/api/v1/does-not-exist")

    assert response.status_code == 404
    body = response.json()
    assert body["status"] == 404
    assert body["title"] == "Not Found"
