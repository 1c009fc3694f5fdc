"""Financial report and data export."""

import structlog
from fastapi import APIRouter, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from pydantic import ValidationError

from roomspa_admin.core.exceptions import AppException
from roomspa_admin.core.formatting import lookup
from roomspa_admin.core.templating import render
from roomspa_admin.dependencies import Backend
from roomspa_admin.schemas.common import describe_errors
from roomspa_admin.schemas.reports import EXPORT_TYPES, ExportForm
from roomspa_admin.services.charts import DEFAULT_PERIOD, PERIODS, choose, rows, series
from roomspa_admin.services.exporting import export_rows, rows_to_csv
from roomspa_admin.services.page_data import fetch_payload

logger = structlog.get_logger()

router = APIRouter()


@router.get("/reports", include_in_schema=False)
async def reports_index() -> RedirectResponse:
    return RedirectResponse("/admin/reports/financial", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/reports/financial", response_class=HTMLResponse, summary="Financial report")
async def financial_report(
    request: Request,
    backend: Backend,
    period: str = Query(DEFAULT_PERIOD),
) -> HTMLResponse:
    """Revenue totals, daily revenue and revenue by service for a period."""
    period = choose(period, PERIODS, DEFAULT_PERIOD)
    payload = await fetch_payload(
        lambda: backend.reports.financial({"period": period}), "financial_report"
    )
    data = payload.data or {}
    charts = [
        series(data, "daily_revenue", "revenue", "date", "Daily revenue", kind="line"),
        series(data, "revenue_by_service", "revenue", "service", "Revenue by service", "donut"),
    ]
    return render(
        request,
        "financial.html",
        payload=payload,
        data=data,
        charts=charts,
        period=period,
        periods=PERIODS,
        services=rows(data, "revenue_by_service"),
        total_revenue=lookup(data, "total_revenue", 0),
    )


def _export_page(
    request: Request,
    values: dict[str, str],
    error: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    return render(
        request,
        "export.html",
        status_code=status_code,
        values=values,
        export_types=EXPORT_TYPES,
        error=error,
    )


@router.get("/reports/export", response_class=HTMLResponse, summary="Data export form")
async def export_page(request: Request) -> HTMLResponse:
    return _export_page(request, {"type": "bookings", "date_from": "", "date_to": ""})


@router.post("/reports/export", summary="Download export")
async def export_data(request: Request, backend: Backend) -> Response:
    """
    Run an export and return it as a download.

    A file produced by the backend is passed through unchanged; JSON rows are
    converted to CSV. Failures re-render the form with an inline error.
    """
    form = await request.form()
    values = {
        "type": str(form.get("type") or "bookings"),
        "date_from": str(form.get("date_from") or ""),
        "date_to": str(form.get("date_to") or ""),
    }

    try:
        export = ExportForm.model_validate(values)
    except ValidationError as e:
        return _export_page(request, values, describe_errors(e), status.HTTP_400_BAD_REQUEST)

    try:
        envelope = await backend.export.data(export.to_params())
    except AppException as e:
        logger.error("export_failed", type=export.type, error=e.message)
        return _export_page(request, values, f"Export failed: {e.message}", e.status_code)

    if not envelope.success:
        logger.warning("export_rejected", type=export.type, message=envelope.message)
        return _export_page(
            request,
            values,
            envelope.message or "Export failed",
            status.HTTP_502_BAD_GATEWAY,
        )

    data = envelope.data
    if isinstance(data, dict) and isinstance(data.get("content"), bytes):
        logger.info("export_passthrough", type=export.type, filename=data.get("filename"))
        return Response(
            content=data["content"],
            media_type=data.get("content_type") or "application/octet-stream",
            headers={"Content-Disposition": f'attachment; filename="{data.get("filename")}"'},
        )

    records = export_rows(data, export.type)
    logger.info("export_completed", type=export.type, rows=len(records))
    return Response(
        content=rows_to_csv(records),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )
