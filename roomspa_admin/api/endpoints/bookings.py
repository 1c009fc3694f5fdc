"""Booking management pages."""

from typing import Literal

from fastapi import APIRouter, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from roomspa_admin.api.actions import run_action
from roomspa_admin.config import settings
from roomspa_admin.core.templating import render
from roomspa_admin.dependencies import Backend
from roomspa_admin.services.list_view import ListQuery, ListSpec, ListView

router = APIRouter()

BookingAction = Literal["start", "complete", "cancel"]

BOOKING_STATUSES = ("all", "pending", "active", "started", "completed", "cancelled")


def _status_param(query: ListQuery) -> dict[str, str | None]:
    return {"status": query.filter if query.filter != "all" else None}


BOOKINGS_LIST = ListSpec(
    collection="bookings",
    search_fields=("customer.name", "therapist.name", "services"),
    filters={
        status: (lambda record, status=status: record.get("status") == status)
        for status in BOOKING_STATUSES
        if status != "all"
    },
    page_size=settings.default_page_size,
    params=_status_param,
)


@router.get("/bookings", response_class=HTMLResponse, summary="Bookings list")
async def bookings_page(
    request: Request,
    backend: Backend,
    page: int = Query(1, ge=1),
    search: str = Query(""),
    status: str = Query("all"),
) -> HTMLResponse:
    """List bookings, optionally narrowed to one status."""
    if status not in BOOKING_STATUSES:
        status = "all"
    view = ListView(backend.bookings.list, BOOKINGS_LIST)
    listing = await view.load(ListQuery(page=page, search=search, filter=status))
    return render(request, "bookings.html", listing=listing, statuses=BOOKING_STATUSES)


@router.post("/bookings/{booking_id}/action", summary="Booking action")
async def booking_action(
    request: Request,
    booking_id: str,
    backend: Backend,
    action: BookingAction = Form(...),
    reason: str | None = Form(None),
) -> RedirectResponse:
    return await run_action(
        request,
        lambda: backend.bookings.action(booking_id, action, reason or None),
        f"Booking {action} completed",
        "/admin/bookings",
        "booking",
    )
