"""
Tests for the health check endpoint.
"""

from __future__ import annotations

import pytest
from django.db import DatabaseError
from django.test import Client

HEALTH_URL = "/health/"


class UnreachableConnection:
    """Stands in for django.db.connection when the database is down."""

    def cursor(self):
        raise DatabaseError("connection refused")


@pytest.mark.django_db
class TestHealthCheck:
    def test_healthy(self):
        response = Client().get(HEALTH_URL)

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "connected"}

    def test_unhealthy_when_database_unreachable(self, monkeypatch):
        monkeypatch.setattr("core.views.connection", UnreachableConnection())

        response = Client().get(HEALTH_URL)

        assert response.status_code == 503
        assert response.json() == {"status": "unhealthy", "database": "disconnected"}
