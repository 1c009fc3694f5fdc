"""Pending booking requests awaiting a decision."""

from typing import Literal

from fastapi import APIRouter, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from roomspa_admin.api.actions import run_action
from roomspa_admin.config import settings
from roomspa_admin.core.templating import render
from roomspa_admin.dependencies import Backend
from roomspa_admin.services.list_view import ListQuery, ListSpec, ListView

router = APIRouter()

RequestAction = Literal["approve", "reject", "cancel"]


def request_statuses() -> tuple[str, ...]:
    """Status filter options; the approved state is named by the backend."""
    return ("all", "pending", settings.pending_request_approved_status, "rejected", "cancelled")


def _status_param(query: ListQuery) -> dict[str, str | None]:
    return {"status": query.filter if query.filter != "all" else None}


PENDING_REQUESTS_LIST = ListSpec(
    collection="requests",
    search_fields=("customer_name", "service", "therapist_preference"),
    page_size=settings.default_page_size,
    page_size_param="page_size",
    params=_status_param,
)


def _list_spec(status: str) -> ListSpec:
    # The backend narrows by status; the loaded page is narrowed again locally
    if status == "all":
        return PENDING_REQUESTS_LIST
    return ListSpec(
        collection=PENDING_REQUESTS_LIST.collection,
        search_fields=PENDING_REQUESTS_LIST.search_fields,
        filters={status: lambda record: record.get("status") == status},
        page_size=PENDING_REQUESTS_LIST.page_size,
        page_size_param=PENDING_REQUESTS_LIST.page_size_param,
        params=_status_param,
    )


@router.get("/pending-requests", response_class=HTMLResponse, summary="Pending requests")
async def pending_requests_page(
    request: Request,
    backend: Backend,
    page: int = Query(1, ge=1),
    search: str = Query(""),
    status: str = Query("all"),
) -> HTMLResponse:
    statuses = request_statuses()
    if status not in statuses:
        status = "all"
    view = ListView(backend.pending_requests.list, _list_spec(status))
    listing = await view.load(ListQuery(page=page, search=search, filter=status))
    return render(request, "pending_requests.html", listing=listing, statuses=statuses)


@router.post("/pending-requests/{request_id}/action", summary="Pending request action")
async def pending_request_action(
    request: Request,
    request_id: str,
    backend: Backend,
    action: RequestAction = Form(...),
) -> RedirectResponse:
    return await run_action(
        request,
        lambda: backend.pending_requests.action(request_id, action),
        f"Request {action} completed",
        "/admin/pending-requests",
        "pending_request",
    )
