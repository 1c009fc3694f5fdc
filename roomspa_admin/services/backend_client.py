"""Client for the RoomSpa admin REST API.

Each resource group is a thin pass-through: build the path and query
parameters, issue the call, hand back an :class:`Envelope`. There are no
retries, no request deduplication and no caching at this layer.
"""

from typing import Any

import httpx
import structlog

from roomspa_admin.config import settings
from roomspa_admin.core.exceptions import BackendUnavailableException
from roomspa_admin.schemas.common import Envelope

logger = structlog.get_logger()


def create_http_client(
    base_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the shared connection pool used for all backend calls."""
    return httpx.AsyncClient(
        base_url=base_url or settings.backend_base_url,
        timeout=settings.backend_timeout,
        headers={"Accept": "application/json"},
        transport=transport,
    )


def clean_params(params: dict[str, Any] | None) -> dict[str, Any]:
    """Drop parameters that are unset or empty."""
    if not params:
        return {}
    return {key: value for key, value in params.items() if value is not None and value != ""}


def _filename_from(response: httpx.Response, fallback: str) -> str:
    disposition = response.headers.get("content-disposition", "")
    for part in disposition.split(";"):
        name, _, value = part.strip().partition("=")
        if name.lower() == "filename" and value:
            return value.strip('"')
    return fallback


def to_envelope(response: httpx.Response) -> Envelope:
    """
    Normalise a backend response into an envelope.

    Args:
        response: Raw HTTP response

    Returns:
        Envelope; ``success`` is true only for a 2xx answer whose body says so

    Raises:
        BackendUnavailableException: If the body is not a JSON object
    """
    try:
        body = response.json()
    except ValueError as e:
        raise BackendUnavailableException("Backend returned a non-JSON response") from e

    if not isinstance(body, dict):
        raise BackendUnavailableException("Backend returned an unexpected payload")

    message = body.get("message") or body.get("error") or body.get("detail")
    data = body.get("data")
    # The login endpoint answers with top-level token/user
    if data is None and "token" in body:
        data = {"token": body.get("token"), "user": body.get("user")}

    return Envelope(
        success=body.get("success") is True and response.is_success,
        data=data,
        message=str(message) if message else None,
        status_code=response.status_code,
    )


class BackendClient:
    """Authenticated access to every backend resource group."""

    def __init__(self, http: httpx.AsyncClient, token: str | None = None):
        """Bind the shared HTTP client and the session token."""
        self._http = http
        self.token = token

        self.auth = AuthAPI(self)
        self.dashboard = DashboardAPI(self)
        self.users = UsersAPI(self)
        self.bookings = BookingsAPI(self)
        self.therapists = TherapistsAPI(self)
        self.customers = CustomersAPI(self)
        self.pending_requests = PendingRequestsAPI(self)
        self.conversations = ConversationsAPI(self)
        self.coupons = CouponsAPI(self)
        self.analytics = AnalyticsAPI(self)
        self.reports = ReportsAPI(self)
        self.export = ExportAPI(self)
        self.monitoring = MonitoringAPI(self)
        self.notifications = NotificationsAPI(self)
        self.settings = SettingsAPI(self)

    def _headers(self) -> dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    async def send(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Issue one HTTP call against the backend.

        Raises:
            BackendUnavailableException: On any transport failure
        """
        try:
            response = await self._http.request(
                method,
                path,
                params=clean_params(params),
                json=body,
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.error("backend_request_failed", method=method, path=path, error=str(e))
            raise BackendUnavailableException(f"Backend request failed: {e!s}") from e

        logger.info(
            "backend_request",
            method=method,
            path=path,
            status_code=response.status_code,
        )
        return response

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Envelope:
        """Issue a call and return its envelope."""
        response = await self.send(method, path, params=params, body=body)
        return to_envelope(response)


class _Resource:
    def __init__(self, client: BackendClient):
        self._client = client


class AuthAPI(_Resource):
    async def login(self, email: str, password: str) -> Envelope:
        return await self._client.request(
            "POST", "auth/login/", body={"email": email, "password": password}
        )

    async def logout(self) -> Envelope:
        return await self._client.request("POST", "auth/logout/", body={})


class DashboardAPI(_Resource):
    async def overview(self) -> Envelope:
        return await self._client.request("GET", "dashboard/")


class UsersAPI(_Resource):
    async def list(self, params: dict[str, Any] | None = None) -> Envelope:
        return await self._client.request("GET", "users/", params=params)

    async def get(self, user_id: str | int) -> Envelope:
        return await self._client.request("GET", f"users/{user_id}/")

    async def action(self, user_id: str | int, action: str, reason: str | None = None) -> Envelope:
        return await self._client.request(
            "POST", f"users/{user_id}/action/", body={"action": action, "reason": reason}
        )


class BookingsAPI(_Resource):
    async def list(self, params: dict[str, Any] | None = None) -> Envelope:
        return await self._client.request("GET", "bookings/", params=params)

    async def get(self, booking_id: str) -> Envelope:
        return await self._client.request("GET", f"bookings/{booking_id}/")

    async def action(self, booking_id: str, action: str, reason: str | None = None) -> Envelope:
        return await self._client.request(
            "POST", f"bookings/{booking_id}/action/", body={"action": action, "reason": reason}
        )


class TherapistsAPI(_Resource):
    async def list(self, params: dict[str, Any] | None = None) -> Envelope:
        return await self._client.request("GET", "therapists/", params=params)

    async def action(self, therapist_id: str | int, action: str) -> Envelope:
        return await self._client.request(
            "POST", f"therapists/{therapist_id}/action/", body={"action": action}
        )


class CustomersAPI(_Resource):
    async def list(self, params: dict[str, Any] | None = None) -> Envelope:
        return await self._client.request("GET", "customers/", params=params)


class PendingRequestsAPI(_Resource):
    async def list(self, params: dict[str, Any] | None = None) -> Envelope:
        return await self._client.request("GET", "pending-requests/", params=params)

    async def action(self, request_id: str, action: str) -> Envelope:
        return await self._client.request(
            "POST", f"pending-requests/{request_id}/action/", body={"action": action}
        )


class ConversationsAPI(_Resource):
    async def list(self, params: dict[str, Any] | None = None) -> Envelope:
        return await self._client.request("GET", "conversations/", params=params)

    async def messages(
        self, conversation_id: str, params: dict[str, Any] | None = None
    ) -> Envelope:
        return await self._client.request(
            "GET", f"conversations/{conversation_id}/messages/", params=params
        )


class CouponsAPI(_Resource):
    async def list(self, params: dict[str, Any] | None = None) -> Envelope:
        return await self._client.request("GET", "coupons/", params=params)

    async def stats(self) -> Envelope:
        return await self._client.request("GET", "coupons/stats/")

    async def get(self, coupon_id: str) -> Envelope:
        return await self._client.request("GET", f"coupons/{coupon_id}/")

    async def create(self, body: dict[str, Any]) -> Envelope:
        return await self._client.request("POST", "coupons/create/", body=body)

    async def update(self, coupon_id: str, body: dict[str, Any]) -> Envelope:
        return await self._client.request("PUT", f"coupons/{coupon_id}/update/", body=body)

    async def toggle_status(self, coupon_id: str) -> Envelope:
        return await self._client.request("POST", f"coupons/{coupon_id}/toggle-status/")

    async def delete(self, coupon_id: str) -> Envelope:
        return await self._client.request("DELETE", f"coupons/{coupon_id}/delete/")


class AnalyticsAPI(_Resource):
    async def bookings(self, params: dict[str, Any] | None = None) -> Envelope:
        return await self._client.request("GET", "analytics/bookings/", params=params)

    async def therapists(self, params: dict[str, Any] | None = None) -> Envelope:
        return await self._client.request("GET", "analytics/therapists/", params=params)

    async def advanced(self, params: dict[str, Any] | None = None) -> Envelope:
        return await self._client.request("GET", "analytics/advanced/", params=params)


class ReportsAPI(_Resource):
    async def financial(self, params: dict[str, Any] | None = None) -> Envelope:
        return await self._client.request("GET", "reports/financial/", params=params)


class ExportAPI(_Resource):
    async def data(self, params: dict[str, Any] | None = None) -> Envelope:
        """
        Request an export.

        A JSON answer is returned as its envelope. Any other content type is
        a ready file; it is wrapped as ``{"content", "content_type",
        "filename"}``.
        """
        response = await self._client.send("GET", "export/", params=params)
        content_type = response.headers.get("content-type", "")
        if "json" in content_type or not response.is_success:
            return to_envelope(response)
        export_type = (params or {}).get("type") or "export"
        return Envelope(
            success=True,
            data={
                "content": response.content,
                "content_type": content_type or "application/octet-stream",
                "filename": _filename_from(response, f"roomspa-{export_type}"),
            },
            status_code=response.status_code,
        )


class MonitoringAPI(_Resource):
    async def live(self) -> Envelope:
        return await self._client.request("GET", "monitoring/")

    async def system_health(self) -> Envelope:
        return await self._client.request("GET", "system/health/")


class NotificationsAPI(_Resource):
    async def tokens(self) -> Envelope:
        return await self._client.request("GET", "notifications/tokens/")

    async def send(self, title: str, message: str, user_type: str) -> Envelope:
        return await self._client.request(
            "POST",
            "notifications/send/",
            body={"title": title, "message": message, "user_type": user_type},
        )


class SettingsAPI(_Resource):
    async def get(self) -> Envelope:
        return await self._client.request("GET", "settings/")

    async def update(self, body: dict[str, Any]) -> Envelope:
        return await self._client.request("PUT", "settings/", body=body)
