"""Tests for sign-in, sign-out and the session guard."""

import pytest
from httpx import AsyncClient

from tests.conftest import ADMIN_EMAIL, ADMIN_TOKEN, FakeAdminAPI


@pytest.mark.asyncio
class TestSessionGuard:
    """Tests for protected admin pages."""

    @pytest.mark.parametrize(
        "path",
        ["/admin", "/admin/users", "/admin/coupons", "/admin/analytics/advanced", "/admin/system"],
    )
    async def test_redirects_without_session(
        self, client: AsyncClient, backend: FakeAdminAPI, path: str
    ):
        """Test that pages redirect to login without touching the backend."""
        response = await client.get(path)

        assert response.status_code == 303
        assert response.headers["location"] == "/login"
        assert backend.calls == []

    async def test_actions_redirect_without_session(
        self, client: AsyncClient, backend: FakeAdminAPI
    ):
        """Test that mutations are guarded too."""
        response = await client.post("/admin/coupons/cp-1/toggle")

        assert response.status_code == 303
        assert response.headers["location"] == "/login"
        assert backend.calls == []

    async def test_root_redirects_to_dashboard(self, client: AsyncClient):
        """Test the site root."""
        response = await client.get("/")

        assert response.status_code == 303
        assert response.headers["location"] == "/admin"


@pytest.mark.asyncio
class TestLogin:
    """Tests for the login form."""

    async def test_login_page(self, client: AsyncClient):
        """Test that the login form renders."""
        response = await client.get("/login")

        assert response.status_code == 200
        assert 'name="password"' in response.text

    async def test_login_success(self, client: AsyncClient, backend: FakeAdminAPI):
        """Test that valid credentials open a session."""
        response = await client.post(
            "/login", data={"email": ADMIN_EMAIL, "password": "secret"}
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/admin"

        dashboard = await client.get("/admin")
        assert dashboard.status_code == 200
        assert "Ada Admin" in dashboard.text
        assert backend.calls[-1].headers["Authorization"] == f"Bearer {ADMIN_TOKEN}"

    async def test_login_wrong_password(self, client: AsyncClient):
        """Test that rejected credentials keep the e-mail and show the error."""
        response = await client.post(
            "/login", data={"email": ADMIN_EMAIL, "password": "wrong"}
        )

        assert response.status_code == 401
        assert "Invalid email or password" in response.text
        assert ADMIN_EMAIL in response.text

        guarded = await client.get("/admin/users")
        assert guarded.status_code == 303

    async def test_login_invalid_email(self, client: AsyncClient, backend: FakeAdminAPI):
        """Test that malformed input is rejected before calling the backend."""
        response = await client.post("/login", data={"email": "nope", "password": "x"})

        assert response.status_code == 400
        assert backend.calls == []

    async def test_login_page_when_signed_in(self, admin_client: AsyncClient):
        """Test that a signed-in admin skips the login form."""
        response = await admin_client.get("/login")

        assert response.status_code == 303
        assert response.headers["location"] == "/admin"


@pytest.mark.asyncio
class TestLogout:
    """Tests for signing out."""

    async def test_logout_clears_session(
        self, admin_client: AsyncClient, backend: FakeAdminAPI
    ):
        """Test that logout notifies the backend and forgets the token."""
        response = await admin_client.post("/logout")

        assert response.status_code == 303
        assert response.headers["location"] == "/login"
        assert backend.paths() == ["auth/logout/"]

        guarded = await admin_client.get("/admin/users")
        assert guarded.status_code == 303

    async def test_logout_survives_backend_failure(
        self, admin_client: AsyncClient, backend: FakeAdminAPI
    ):
        """Test that the session is cleared even when the backend call fails."""
        backend.fail("auth/logout/", {"success": False, "message": "boom"}, status_code=500)

        response = await admin_client.post("/logout")

        assert response.status_code == 303
        guarded = await admin_client.get("/admin")
        assert guarded.status_code == 303
