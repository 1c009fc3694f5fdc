"""User management pages."""

from typing import Literal

from fastapi import APIRouter, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from roomspa_admin.api.actions import run_action
from roomspa_admin.config import settings
from roomspa_admin.core.templating import render
from roomspa_admin.dependencies import Backend
from roomspa_admin.services.list_view import ListQuery, ListSpec, ListView
from roomspa_admin.services.page_data import fetch_payload

router = APIRouter()

UserAction = Literal["activate", "deactivate", "verify", "unverify", "delete"]

USER_ROLES = ("all", "customer", "therapist", "admin")

USERS_LIST = ListSpec(
    collection="users",
    search_fields=("name", "email"),
    filters={
        role: (lambda record, role=role: record.get("role") == role)
        for role in USER_ROLES
        if role != "all"
    },
    page_size=settings.default_page_size,
)


@router.get("/users", response_class=HTMLResponse, summary="Users list")
async def users_page(
    request: Request,
    backend: Backend,
    page: int = Query(1, ge=1),
    search: str = Query(""),
    role: str = Query("all"),
) -> HTMLResponse:
    """
    List users.

    The search box filters the loaded page only; the page number is sent to
    the backend.
    """
    view = ListView(backend.users.list, USERS_LIST)
    listing = await view.load(ListQuery(page=page, search=search, filter=role))
    return render(request, "users.html", listing=listing, roles=USER_ROLES)


@router.get("/users/{user_id}", response_class=HTMLResponse, summary="User detail")
async def user_detail(request: Request, user_id: str, backend: Backend) -> HTMLResponse:
    """Profile, bookings and spend of one user."""
    detail = await fetch_payload(lambda: backend.users.get(user_id), "user")
    return render(request, "user_detail.html", detail=detail, user_id=user_id)


@router.post("/users/{user_id}/action", summary="User action")
async def user_action(
    request: Request,
    user_id: str,
    backend: Backend,
    action: UserAction = Form(...),
    reason: str | None = Form(None),
) -> RedirectResponse:
    return await run_action(
        request,
        lambda: backend.users.action(user_id, action, reason or None),
        f"User {action} completed",
        "/admin/users",
        "user",
    )
