"""Therapist management pages."""

from typing import Literal

from fastapi import APIRouter, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from roomspa_admin.api.actions import run_action
from roomspa_admin.config import settings
from roomspa_admin.core.templating import render
from roomspa_admin.dependencies import Backend
from roomspa_admin.services.list_view import ListQuery, ListSpec, ListView

router = APIRouter()

TherapistAction = Literal["approve", "reject", "suspend", "reactivate"]

THERAPIST_FILTERS = {
    "verified": lambda record: bool(record.get("verified")),
    "pending": lambda record: not record.get("verified"),
    "available": lambda record: bool(record.get("available")),
}

THERAPISTS_LIST = ListSpec(
    collection="therapists",
    search_fields=("name", "email", "phone"),
    filters=THERAPIST_FILTERS,
    page_size=settings.default_page_size,
)


@router.get("/therapists", response_class=HTMLResponse, summary="Therapists list")
async def therapists_page(
    request: Request,
    backend: Backend,
    page: int = Query(1, ge=1),
    search: str = Query(""),
    show: str = Query("all"),
) -> HTMLResponse:
    """Therapist cards with verification state and approval actions."""
    view = ListView(backend.therapists.list, THERAPISTS_LIST)
    listing = await view.load(ListQuery(page=page, search=search, filter=show))
    return render(
        request,
        "therapists.html",
        listing=listing,
        filters=("all", *THERAPIST_FILTERS),
    )


@router.post("/therapists/{therapist_id}/action", summary="Therapist action")
async def therapist_action(
    request: Request,
    therapist_id: str,
    backend: Backend,
    action: TherapistAction = Form(...),
) -> RedirectResponse:
    return await run_action(
        request,
        lambda: backend.therapists.action(therapist_id, action),
        f"Therapist {action} completed",
        "/admin/therapists",
        "therapist",
    )
