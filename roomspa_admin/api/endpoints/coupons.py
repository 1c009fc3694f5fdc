"""Coupon management: list, create, edit, toggle and delete."""

from typing import Any

import structlog
from fastapi import APIRouter, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from pydantic import ValidationError

from roomspa_admin.api.actions import run_action
from roomspa_admin.core.exceptions import AppException
from roomspa_admin.core.session import flash
from roomspa_admin.core.templating import render
from roomspa_admin.dependencies import Backend
from roomspa_admin.schemas.common import Envelope, describe_errors
from roomspa_admin.schemas.coupons import (
    COUPON_FILTERS,
    COUPON_FORM_DEFAULTS,
    form_values,
    parse_coupon_form,
    record_values,
)
from roomspa_admin.services.backend_client import BackendClient
from roomspa_admin.services.list_view import ListQuery, ListSpec, ListView
from roomspa_admin.services.page_data import fetch_payload

logger = structlog.get_logger()

router = APIRouter()

COUPONS_PATH = "/admin/coupons"


def _active_param(query: ListQuery) -> dict[str, str | None]:
    if query.filter == "active":
        return {"is_active": "true"}
    if query.filter == "inactive":
        return {"is_active": "false"}
    return {}


COUPONS_LIST = ListSpec(
    collection="coupons",
    search_fields=("code", "name"),
    filters={
        "active": lambda record: bool(record.get("is_active")),
        "inactive": lambda record: not record.get("is_active"),
    },
    page_size=10,
    page_size_param="page_size",
    search_remote=True,
    params=_active_param,
)


def _coupon_record(envelope: Envelope) -> dict[str, Any]:
    data = envelope.data_dict()
    coupon = data.get("coupon")
    return coupon if isinstance(coupon, dict) else data


async def _load_coupon(backend: BackendClient, coupon_id: str) -> dict[str, Any] | None:
    try:
        envelope = await backend.coupons.get(coupon_id)
    except AppException as e:
        logger.error("coupon_fetch_failed", coupon_id=coupon_id, error=e.message)
        return None
    if not envelope.success:
        logger.error("coupon_fetch_failed", coupon_id=coupon_id, error=envelope.message)
        return None
    return _coupon_record(envelope)


@router.get("/coupons", response_class=HTMLResponse, summary="Coupons list")
async def coupons_page(
    request: Request,
    backend: Backend,
    page: int = Query(1, ge=1),
    search: str = Query(""),
    filter: str = Query("all"),
) -> HTMLResponse:
    """Coupons with usage, validity and status, plus aggregate statistics."""
    if filter not in COUPON_FILTERS:
        filter = "all"
    view = ListView(backend.coupons.list, COUPONS_LIST)
    listing = await view.load(ListQuery(page=page, search=search, filter=filter))
    stats = await fetch_payload(backend.coupons.stats, "coupon_stats")
    return render(
        request,
        "coupons.html",
        listing=listing,
        stats=stats,
        filters=COUPON_FILTERS,
    )


async def _save_coupon(
    request: Request,
    backend: BackendClient,
    coupon_id: str | None,
) -> Response:
    """Validate the posted form and create or update the coupon."""
    values = form_values(await request.form())
    context = {"values": values, "coupon_id": coupon_id}

    try:
        coupon = parse_coupon_form(values)
    except ValidationError as e:
        return render(
            request,
            "coupon_form.html",
            status_code=status.HTTP_400_BAD_REQUEST,
            error=describe_errors(e),
            **context,
        )

    try:
        if coupon_id is None:
            envelope = await backend.coupons.create(coupon.to_payload())
        else:
            envelope = await backend.coupons.update(coupon_id, coupon.to_payload())
    except AppException as e:
        logger.error("coupon_save_failed", coupon_id=coupon_id, error=e.message)
        return render(
            request,
            "coupon_form.html",
            status_code=e.status_code,
            error=f"Failed to save coupon: {e.message}",
            **context,
        )

    if not envelope.success:
        logger.warning("coupon_save_rejected", coupon_id=coupon_id, message=envelope.message)
        return render(
            request,
            "coupon_form.html",
            status_code=status.HTTP_400_BAD_REQUEST,
            error=envelope.message or "Failed to save coupon",
            **context,
        )

    verb = "created" if coupon_id is None else "updated"
    logger.info("coupon_saved", coupon_id=coupon_id, code=coupon.code)
    flash(request, f"Coupon {coupon.code} {verb} successfully", "success")
    return RedirectResponse(COUPONS_PATH, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/coupons/new", response_class=HTMLResponse, summary="New coupon form")
async def new_coupon(request: Request) -> HTMLResponse:
    return render(
        request,
        "coupon_form.html",
        values=dict(COUPON_FORM_DEFAULTS),
        coupon_id=None,
        error=None,
    )


@router.post("/coupons/new", response_class=HTMLResponse, summary="Create coupon")
async def create_coupon(request: Request, backend: Backend) -> Response:
    return await _save_coupon(request, backend, None)


@router.get("/coupons/{coupon_id}/edit", response_class=HTMLResponse, summary="Edit coupon form")
async def edit_coupon(request: Request, coupon_id: str, backend: Backend) -> Response:
    """Seed the form from the stored coupon."""
    coupon = await _load_coupon(backend, coupon_id)
    if coupon is None:
        flash(request, "Coupon could not be loaded", "error")
        return RedirectResponse(COUPONS_PATH, status_code=status.HTTP_303_SEE_OTHER)
    return render(
        request,
        "coupon_form.html",
        values=record_values(coupon),
        coupon_id=coupon_id,
        error=None,
    )


@router.post("/coupons/{coupon_id}/edit", response_class=HTMLResponse, summary="Update coupon")
async def update_coupon(request: Request, coupon_id: str, backend: Backend) -> Response:
    return await _save_coupon(request, backend, coupon_id)


@router.post("/coupons/{coupon_id}/toggle", summary="Toggle coupon status")
async def toggle_coupon(request: Request, coupon_id: str, backend: Backend) -> RedirectResponse:
    return await run_action(
        request,
        lambda: backend.coupons.toggle_status(coupon_id),
        "Coupon status updated",
        COUPONS_PATH,
        "coupon",
    )


@router.get(
    "/coupons/{coupon_id}/delete",
    response_class=HTMLResponse,
    summary="Confirm coupon deletion",
)
async def confirm_delete_coupon(
    request: Request, coupon_id: str, backend: Backend
) -> HTMLResponse:
    coupon = await _load_coupon(backend, coupon_id)
    return render(
        request,
        "coupon_delete.html",
        coupon_id=coupon_id,
        code=(coupon or {}).get("code") or coupon_id,
    )


@router.post("/coupons/{coupon_id}/delete", summary="Delete coupon")
async def delete_coupon(request: Request, coupon_id: str, backend: Backend) -> RedirectResponse:
    return await run_action(
        request,
        lambda: backend.coupons.delete(coupon_id),
        "Coupon deleted",
        COUPONS_PATH,
        "coupon",
    )
