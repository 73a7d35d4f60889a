"""
Tests for the health and root endpoints.
"""

import os
from unittest.mock import patch

from fastapi.testclient import TestClient

from api.main import API_NAME, API_VERSION, app

client = TestClient(app)


class TestHealthEndpoint:
    def test_health_ok(self):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["name"] == API_NAME
        assert data["version"] == API_VERSION
        assert data["uptime_seconds"] >= 0
        assert data["providers"]["mealdb"] is True

    @patch.dict(os.environ, {"SPOONACULAR_API_KEY": "test-key"})
    def test_health_reports_configured_spoonacular(self):
        assert client.get("/health").json()["providers"]["spoonacular"] is True

    def test_health_reports_missing_spoonacular_key(self, monkeypatch):
        monkeypatch.delenv("SPOONACULAR_API_KEY", raising=False)

        assert client.get("/health").json()["providers"]["spoonacular"] is False

    def test_root_points_to_docs(self):
        data = client.get("/").json()

        assert data["name"] == API_NAME
        assert data["docs"] == "/docs"
