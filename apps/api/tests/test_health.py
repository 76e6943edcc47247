"""Tests for the health endpoint."""
from fastapi.testclient import TestClient
from apps.api.main import app

client = TestClient(app)


def test_health_returns_200():
    response = client.get("/api/v1/health")
    assert response.status_code == 200


def test_health_returns_status_ok():
    response = client.get("/api/v1/health")
    data = response.json()
    assert data["status"] == "healthy"


def test_health_reports_service_and_version():
    data = client.get("/api/v1/health").json()
    assert data["service"] == "ofx-ledger"
    assert data["version"] == "0.1.0"


def test_unknown_route_is_problem_detail():
    response = client.get("/api/v1/does-not-exist")
    assert response.status_code == 404
    assert response.json()["status"] == 404
