"""Dashboard overview."""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from roomspa_admin.core.formatting import to_number
from roomspa_admin.core.templating import render
from roomspa_admin.dependencies import Backend
from roomspa_admin.services.charts import ChartSeries
from roomspa_admin.services.page_data import fetch_payload

router = APIRouter()

# Shown when the overview cannot be loaded
PLACEHOLDER_OVERVIEW = {
    "users": {"total": 0, "customers": 0, "therapists": 0, "new_today": 0, "verified": 0},
    "bookings": {"total": 0, "active": 0, "completed": 0, "pending": 0, "today": 0},
    "revenue": {"today": 0, "this_week": 0, "this_month": 0, "avg_booking_value": 0},
    "therapists": {"total": 0, "available": 0, "verified": 0},
    "system": {},
    "alerts": [],
}

BOOKING_STATUSES = ("pending", "active", "started", "completed", "cancelled")


@router.get("", response_class=HTMLResponse, summary="Dashboard overview")
async def dashboard(request: Request, backend: Backend) -> HTMLResponse:
    """Key metrics across users, bookings, revenue and therapists."""
    overview = await fetch_payload(
        backend.dashboard.overview, "dashboard", placeholder=PLACEHOLDER_OVERVIEW
    )
    data = overview.data or PLACEHOLDER_OVERVIEW
    bookings = data.get("bookings") if isinstance(data.get("bookings"), dict) else {}
    revenue = data.get("revenue") if isinstance(data.get("revenue"), dict) else {}

    charts = [
        ChartSeries(
            name="Bookings by status",
            kind="donut",
            categories=[status.title() for status in BOOKING_STATUSES],
            data=[to_number(bookings.get(status)) for status in BOOKING_STATUSES],
        ),
        ChartSeries(
            name="Revenue",
            kind="bar",
            categories=["Today", "This week", "This month"],
            data=[to_number(revenue.get(key)) for key in ("today", "this_week", "this_month")],
        ),
    ]
    return render(request, "dashboard.html", overview=overview, data=data, charts=charts)
