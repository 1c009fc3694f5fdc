"""Tests for the request logging middleware."""

import pytest
from httpx import AsyncClient
from structlog.testing import capture_logs

from tests.conftest import ADMIN_EMAIL


def completed(logs: list[dict]) -> list[dict]:
    return [entry for entry in logs if entry["event"] == "request_completed"]


@pytest.mark.asyncio
class TestRequestLogging:
    """Tests for per-request log lines and headers."""

    async def test_request_id_header(self, client: AsyncClient):
        """Test that every logged request is given an id."""
        response = await client.get("/login")

        assert response.status_code == 200
        assert len(response.headers["X-Request-ID"]) == 12
        assert "X-Process-Time" in response.headers

    async def test_incoming_request_id_kept(self, client: AsyncClient):
        """Test that an upstream request id is passed through."""
        with capture_logs() as logs:
            response = await client.get("/login", headers={"X-Request-ID": "edge-42"})

        assert response.headers["X-Request-ID"] == "edge-42"
        assert completed(logs)[0]["request_id"] == "edge-42"

    async def test_signed_in_admin_logged(self, admin_client: AsyncClient):
        """Test that page views name the admin who made them."""
        with capture_logs() as logs:
            await admin_client.get("/admin/users")

        entry = completed(logs)[0]
        assert entry["admin"] == ADMIN_EMAIL
        assert entry["path"] == "/admin/users"
        assert entry["status_code"] == 200
        assert entry["stream"] is False

    async def test_anonymous_request(self, client: AsyncClient):
        """Test that requests without a session carry no admin."""
        with capture_logs() as logs:
            await client.get("/admin/users")

        assert completed(logs)[0]["admin"] is None

    async def test_event_stream_tagged(self, admin_client: AsyncClient):
        """Test that event streams are told apart from page views."""
        with capture_logs() as logs:
            await admin_client.get("/admin/monitoring/stream", params={"events": 1})

        entry = completed(logs)[0]
        assert entry["stream"] is True
        assert entry["admin"] == ADMIN_EMAIL

    async def test_quiet_paths_not_logged(self, client: AsyncClient):
        """Test that liveness checks stay out of the request log."""
        with capture_logs() as logs:
            response = await client.get("/ping")

        assert completed(logs) == []
        assert "X-Request-ID" not in response.headers
