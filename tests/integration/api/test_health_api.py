"""
Integration tests for health, readiness and metrics endpoints.
"""

import pytest


@pytest.mark.django_db
@pytest.mark.integration
class TestHealthAPI:
    """Integration tests for operational endpoints."""

    def test_health(self, client):
        response = client.get("/health/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health_db(self, client):
        response = client.get("/health/db/")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    def test_ready(self, client):
        response = client.get("/ready/")

        assert response.status_code == 200

    def test_metrics(self, client):
        client.get("/health/")

        response = client.get("/metrics")

        assert response.status_code == 200
        body = response.content.decode()
        assert "http_requests_total" in body
        assert "licenses_issued_total" in body
