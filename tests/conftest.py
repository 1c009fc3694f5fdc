"""Shared fixtures: an in-memory admin API and clients driving the app."""

import json
from collections.abc import AsyncGenerator
from copy import deepcopy
from typing import Any

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from roomspa_admin.config import settings
from roomspa_admin.dependencies import get_http_client
from roomspa_admin.main import app
from roomspa_admin.services.backend_client import create_http_client

BACKEND_URL = "http://backend.test/admin/api/"
ADMIN_EMAIL = "admin@roomspa.com"
ADMIN_PASSWORD = "secret"
ADMIN_TOKEN = "test-token"

SEED: dict[str, list[dict[str, Any]]] = {
    "users": [
        {
            "id": 1,
            "name": "John Doe",
            "email": "john@example.com",
            "role": "customer",
            "is_active": True,
            "verification_status": True,
            "date_created": "2024-01-15T10:30:00Z",
        },
        {
            "id": 2,
            "name": "Jane Smith",
            "email": "jane@example.com",
            "role": "therapist",
            "is_active": True,
            "verification_status": False,
            "date_created": "2024-02-01T09:00:00Z",
        },
    ],
    "bookings": [
        {
            "id": "b-1",
            "customer": {"name": "John Doe"},
            "therapist": {"name": "Jane Smith"},
            "services": '["Swedish Massage", "Aromatherapy"]',
            "status": "active",
            "total_amount": 120.5,
            "booking_time": "2024-03-01T14:00:00Z",
        },
        {
            "id": "b-2",
            "customer": {"name": "Sarah Wilson"},
            "therapist": {"name": "Jane Smith"},
            "services": "Deep Tissue, 60 min",
            "status": "completed",
            "total_amount": 90,
            "booking_time": "2024-03-02T10:00:00Z",
        },
    ],
    "therapists": [
        {
            "id": 2,
            "name": "Jane Smith",
            "email": "jane@example.com",
            "phone": "+1234567891",
            "verified": True,
            "available": True,
            "rating": 4.8,
            "bookings": 25,
            "specialties": ["Swedish Massage", "Deep Tissue"],
        },
        {
            "id": 3,
            "name": "Mark Lee",
            "email": "mark@example.com",
            "phone": "+1234567892",
            "verified": False,
            "available": False,
        },
    ],
    "customers": [
        {
            "id": 1,
            "name": "John Doe",
            "email": "john@example.com",
            "phone_number": "+1234567890",
            "booking_count": 15,
            "total_spent": 1250.75,
            "last_booking": "2024-01-15",
            "date_created": "2023-06-15",
            "verification_status": True,
            "is_active": True,
        },
        {
            "id": 4,
            "name": "Sarah Wilson",
            "email": "sarah@example.com",
            "phone_number": "+1234567891",
            "booking_count": 8,
            "total_spent": 680.5,
            "last_booking": "2024-01-10",
            "date_created": "2023-08-20",
            "verification_status": True,
            "is_active": True,
        },
    ],
    "requests": [
        {
            "id": "req-1",
            "customer_name": "Emily Johnson",
            "service": "Swedish Massage",
            "requested_date": "2024-01-20",
            "requested_time": "14:00",
            "duration": 60,
            "status": "pending",
            "created_at": "2024-01-15 10:30:00",
            "therapist_preference": "Jane Smith",
        },
        {
            "id": "req-2",
            "customer_name": "Michael Brown",
            "service": "Deep Tissue Massage",
            "requested_date": "2024-01-22",
            "requested_time": "10:00",
            "duration": 90,
            "status": "pending",
            "created_at": "2024-01-16 14:20:00",
            "therapist_preference": "Any available",
        },
    ],
    "conversations": [
        {
            "id": "c-1",
            "customer": {"name": "John Doe"},
            "therapist": {"name": "Jane Smith"},
            "last_message": "See you tomorrow",
            "last_message_time": "2024-03-01T18:00:00Z",
            "unread_count": 2,
            "message_count": 10,
            "status": "active",
        },
        {
            "id": "c-2",
            "customer": {"name": "Sarah Wilson"},
            "therapist": {"name": "Mark Lee"},
            "last_message": "Thanks for the session",
            "last_message_time": "2024-02-20T12:00:00Z",
            "unread_count": 1,
            "message_count": 5,
            "status": "closed",
        },
    ],
    "coupons": [
        {
            "id": "cp-1",
            "code": "SAVE10",
            "name": "Save ten percent",
            "discount_type": "percentage",
            "discount_value": 10,
            "minimum_order_amount": 50,
            "usage_limit": 100,
            "used_count": 40,
            "is_active": True,
            "valid_from": "2024-01-01T00:00:00Z",
            "valid_until": "2024-12-31T23:59:00Z",
        },
    ],
}


class FakeAdminAPI:
    """
    In-memory stand-in for the RoomSpa admin REST API.

    Served through ``httpx.MockTransport``. Every request is recorded in
    ``calls``; ``fail`` makes one path answer with a fixed body or raise.
    """

    def __init__(self):
        self.state = deepcopy(SEED)
        self.settings: dict[str, Any] = {"general": {"business_name": "RoomSpa Test"}}
        self.calls: list[httpx.Request] = []
        self.bodies: list[tuple[str, Any]] = []
        self.overrides: dict[str, Any] = {}

    def fail(self, path: str, body: Any = None, status_code: int = 200) -> None:
        """Make ``path`` answer with ``body``; an exception instance is raised instead."""
        self.overrides[path] = (body, status_code)

    def paths(self) -> list[str]:
        return [self._path(request) for request in self.calls]

    @staticmethod
    def _path(request: httpx.Request) -> str:
        return request.url.path.removeprefix("/admin/api/")

    @staticmethod
    def _ok(data: Any = None, message: str | None = None, status_code: int = 200):
        body: dict[str, Any] = {"success": True, "data": data}
        if message:
            body["message"] = message
        return httpx.Response(status_code, json=body)

    @staticmethod
    def _error(message: str, status_code: int = 400):
        return httpx.Response(status_code, json={"success": False, "message": message})

    def _page(self, key: str, records: list[dict[str, Any]], params) -> httpx.Response:
        page = int(params.get("page", 1))
        size = int(params.get("per_page") or params.get("page_size") or 20)
        total_pages = max(1, -(-len(records) // size))
        chunk = records[(page - 1) * size : page * size]
        return self._ok(
            {
                key: chunk,
                "pagination": {
                    "current_page": page,
                    "total_pages": total_pages,
                    "total_count": len(records),
                    "has_next": page < total_pages,
                    "has_previous": page > 1,
                },
            }
        )

    def _find(self, key: str, record_id: str) -> dict[str, Any] | None:
        for record in self.state[key]:
            if str(record["id"]) == record_id:
                return record
        return None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        path = self._path(request)
        body = json.loads(request.content) if request.content else None
        if body is not None:
            self.bodies.append((path, body))

        if path in self.overrides:
            override, status_code = self.overrides[path]
            if isinstance(override, Exception):
                raise override
            if isinstance(override, httpx.Response):
                return override
            return httpx.Response(status_code, json=override)

        if path == "auth/login/":
            if body == {"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}:
                return httpx.Response(
                    200,
                    json={
                        "success": True,
                        "token": ADMIN_TOKEN,
                        "user": {"id": 99, "name": "Ada Admin", "email": ADMIN_EMAIL},
                    },
                )
            return self._error("Invalid email or password", 401)

        if request.headers.get("Authorization") != f"Bearer {ADMIN_TOKEN}":
            return self._error("Authentication required", 401)

        return self.route(request.method, path, request.url.params, body)

    def route(self, method: str, path: str, params, body: Any) -> httpx.Response:
        parts = path.strip("/").split("/")
        resource = parts[0]

        if path == "auth/logout/":
            return self._ok(message="Logged out")
        if path == "dashboard/":
            return self._ok(
                {
                    "users": {"total": 138, "customers": 120, "therapists": 18, "new_today": 1},
                    "bookings": {"total": 67, "active": 3, "completed": 50, "pending": 4},
                    "revenue": {"today": 250, "this_week": 1800.5, "this_month": 7200},
                    "therapists": {"total": 18, "available": 7, "verified": 15},
                    "alerts": [],
                }
            )

        if resource in ("users", "bookings", "therapists", "customers") and len(parts) == 1:
            records = self.state[resource]
            if params.get("status"):
                records = [r for r in records if r.get("status") == params["status"]]
            if params.get("search"):
                needle = params["search"].lower()
                records = [r for r in records if needle in json.dumps(r).lower()]
            return self._page(resource, records, params)
        if resource in ("users", "bookings") and len(parts) == 2:
            record = self._find(resource, parts[1])
            return self._ok(record) if record else self._error("Not found", 404)
        if resource in ("users", "bookings", "therapists") and parts[-1] == "action":
            record = self._find(resource, parts[1])
            if record is None:
                return self._error("Not found", 404)
            record["last_action"] = body["action"]
            return self._ok(record, message=f"{resource[:-1].title()} {body['action']} done")

        if resource == "pending-requests":
            if len(parts) == 1:
                records = self.state["requests"]
                if params.get("status"):
                    records = [r for r in records if r["status"] == params["status"]]
                return self._page("requests", records, params)
            record = self._find("requests", parts[1])
            if record is None:
                return self._error("Request not found", 404)
            record["status"] = {
                "approve": settings.pending_request_approved_status,
                "reject": "rejected",
                "cancel": "cancelled",
            }[body["action"]]
            return self._ok(record, message="Request updated")

        if resource == "conversations":
            if len(parts) == 1:
                return self._page("conversations", self.state["conversations"], params)
            messages = [
                {"id": 1, "sender": {"name": "John Doe"}, "content": "Hello there"},
                {"id": 2, "sender": {"name": "Jane Smith"}, "content": "See you tomorrow"},
            ]
            return self._page("messages", messages, params)

        if resource == "coupons":
            return self.coupons(method, parts, params, body)

        if resource == "analytics":
            return self._ok(
                {
                    "daily_trends": [
                        {"date": "2024-03-01", "bookings": 5, "revenue": 500},
                        {"date": "2024-03-02", "bookings": 7, "revenue": 640},
                    ],
                    "financial_summary": {
                        "total_bookings": 12,
                        "total_revenue": 1140,
                        "avg_booking_value": 95,
                        "completion_rate": 91.5,
                    },
                    "period": params.get("period"),
                    "metric": params.get("metric"),
                }
            )
        if path == "reports/financial/":
            return self._ok(
                {
                    "total_revenue": 45230.75,
                    "total_bookings": 342,
                    "avg_booking_value": 132.25,
                    "growth_rate": 15.8,
                    "revenue_by_service": [
                        {"service": "Swedish Massage", "revenue": 18500.25, "bookings": 140},
                    ],
                    "daily_revenue": [{"date": "2024-01-01", "revenue": 1250}],
                }
            )
        if path == "export/":
            return self._ok(
                {
                    "data": [
                        {"id": "b-1", "customer": "John Doe", "amount": 120.5},
                        {"id": "b-2", "customer": "=cmd()", "amount": 90},
                    ]
                }
            )
        if path == "monitoring/":
            return self._ok(
                {
                    "system_status": "healthy",
                    "uptime": "5 days",
                    "active_users": 12,
                    "memory_usage": 61,
                    "recent_alerts": [{"type": "warning", "message": "High load", "time": "1m"}],
                }
            )
        if path == "system/health/":
            return self._ok(
                {
                    "system_status": "healthy",
                    "db_stats": {"total_users": 138, "total_bookings": 67},
                    "health_indicators": [
                        {"metric": "Database", "status": "healthy", "value": "ok", "type": "db"}
                    ],
                }
            )
        if path == "notifications/tokens/":
            return self._ok(
                [
                    {"user_type": "customers", "count": 120},
                    {"user_type": "therapists", "count": 25},
                    {"user_type": "all", "count": 145},
                ]
            )
        if path == "notifications/send/":
            return self._ok(message="Notification queued")
        if path == "settings/":
            if method == "PUT":
                self.settings = body
                return self._ok(self.settings, message="Settings saved")
            return self._ok(self.settings)

        return self._error(f"No route for {method} {path}", 404)

    def coupons(self, method: str, parts: list[str], params, body: Any) -> httpx.Response:
        coupons = self.state["coupons"]
        if len(parts) == 1:
            records = coupons
            if params.get("is_active"):
                wanted = params["is_active"] == "true"
                records = [c for c in records if c["is_active"] is wanted]
            if params.get("search"):
                needle = params["search"].lower()
                records = [
                    c for c in records if needle in c["code"].lower() or needle in c["name"].lower()
                ]
            return self._page("coupons", records, params)
        if parts[1] == "stats":
            return self._ok(
                {
                    "total_coupons": len(coupons),
                    "active_coupons": sum(1 for c in coupons if c["is_active"]),
                    "total_usage": sum(c.get("used_count", 0) for c in coupons),
                    "total_discount_given": 400,
                }
            )
        if parts[1] == "create":
            if any(c["code"] == body["code"] for c in coupons):
                return self._error("Coupon code already exists")
            coupon = {**body, "id": f"cp-{len(coupons) + 1}", "used_count": 0}
            coupons.append(coupon)
            return self._ok(coupon, message="Coupon created", status_code=201)

        coupon = self._find("coupons", parts[1])
        if coupon is None:
            return self._error("Coupon not found", 404)
        if len(parts) == 2:
            return self._ok(coupon)
        if parts[2] == "update":
            coupon.update(body)
            return self._ok(coupon, message="Coupon updated")
        if parts[2] == "toggle-status":
            coupon["is_active"] = not coupon["is_active"]
            return self._ok(coupon)
        if parts[2] == "delete":
            coupons.remove(coupon)
            return self._ok(message="Coupon deleted")
        return self._error("Unsupported coupon call", 404)


@pytest.fixture
def backend() -> FakeAdminAPI:
    """Fresh in-memory admin API for each test."""
    return FakeAdminAPI()


@pytest_asyncio.fixture
async def http_client(backend: FakeAdminAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Backend connection pool wired to the in-memory API."""
    async with create_http_client(
        base_url=BACKEND_URL, transport=httpx.MockTransport(backend.handler)
    ) as http:
        yield http


@pytest_asyncio.fixture
async def client(http_client: httpx.AsyncClient) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client without a session."""
    app.dependency_overrides[get_http_client] = lambda: http_client

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin_client(client: AsyncClient, backend: FakeAdminAPI) -> AsyncClient:
    """Client signed in through the login form; the login call is not kept in ``calls``."""
    response = await client.post(
        "/login", data={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 303
    backend.calls.clear()
    backend.bodies.clear()
    return client
