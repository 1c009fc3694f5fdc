"""Tests for health endpoints, error pages and metrics."""

import httpx
import pytest
from httpx import AsyncClient

from tests.conftest import FakeAdminAPI


@pytest.mark.asyncio
class TestHealth:
    """Tests for the health checks."""

    async def test_health(self, client: AsyncClient):
        """Test the basic health check."""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert "environment" in data

    async def test_ping(self, client: AsyncClient):
        """Test the ping endpoint."""
        response = await client.get("/ping")

        assert response.status_code == 200
        assert response.json() == {"message": "pong"}

    async def test_detailed_health(self, client: AsyncClient, backend: FakeAdminAPI):
        """Test that any answer from the admin API counts as reachable."""
        response = await client.get("/health/detailed")

        assert response.status_code == 200
        assert response.json()["backend"] == "healthy"
        assert len(backend.calls) == 1

    async def test_detailed_health_degraded(self, client: AsyncClient, backend: FakeAdminAPI):
        """Test the degraded state when the admin API is unreachable."""
        backend.fail("", httpx.ConnectError("refused"))

        response = await client.get("/health/detailed")

        data = response.json()
        assert data["status"] == "degraded"
        assert data["backend"] == "unhealthy"


@pytest.mark.asyncio
class TestErrorPages:
    """Tests for error rendering."""

    async def test_unknown_page(self, admin_client: AsyncClient):
        """Test the not-found page."""
        response = await admin_client.get("/admin/does-not-exist")

        assert response.status_code == 404
        assert "Page Not Found" in response.text

    async def test_invalid_query_parameter(self, admin_client: AsyncClient):
        """Test that bad query parameters render an error page."""
        response = await admin_client.get("/admin/users", params={"page": "zero"})

        assert response.status_code == 422
        assert "Invalid Request" in response.text

    async def test_unknown_action_rejected(
        self, admin_client: AsyncClient, backend: FakeAdminAPI
    ):
        """Test that only known actions reach the backend."""
        response = await admin_client.post("/admin/users/1/action", data={"action": "promote"})

        assert response.status_code == 422
        assert backend.calls == []


@pytest.mark.asyncio
async def test_metrics_exposed(client: AsyncClient):
    """Test that Prometheus metrics are served."""
    await client.get("/health")

    response = await client.get("/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text
