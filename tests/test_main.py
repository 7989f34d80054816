"""Tests for main application endpoints."""

from fastapi.testclient import TestClient

from parcelhub.main import app

client = TestClient(app)


def test_health_check():
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "parcelhub"


def test_unknown_route_is_404():
    response = client.get("/nowhere")
    assert response.status_code == 404
