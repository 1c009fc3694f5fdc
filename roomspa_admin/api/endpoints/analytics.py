"""Analytics pages: overview, bookings, therapists and advanced."""

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse

from roomspa_admin.core.formatting import to_number
from roomspa_admin.core.templating import render
from roomspa_admin.dependencies import Backend
from roomspa_admin.services.charts import (
    ADVANCED_METRICS,
    ADVANCED_PERIODS,
    DEFAULT_METRIC,
    DEFAULT_PERIOD,
    PERIODS,
    ChartSeries,
    choose,
    rows,
    section,
    series,
)
from roomspa_admin.services.page_data import fetch_payload

router = APIRouter()

RATING_LEVELS = (
    ("5 Star", "five_star_percentage"),
    ("4 Star", "four_star_percentage"),
    ("3 Star", "three_star_percentage"),
    ("2 Star", "two_star_percentage"),
    ("1 Star", "one_star_percentage"),
)


@router.get("/analytics", response_class=HTMLResponse, summary="Analytics overview")
async def analytics_overview(request: Request, backend: Backend) -> HTMLResponse:
    """Daily booking and revenue trends with the financial summary."""
    payload = await fetch_payload(backend.analytics.bookings, "analytics_overview")
    data = payload.data or {}
    charts = [
        series(data, "daily_trends", "bookings", "date", "Bookings", kind="line"),
        series(data, "daily_trends", "revenue", "date", "Revenue", kind="line"),
    ]
    return render(
        request,
        "analytics.html",
        payload=payload,
        summary=section(data, "financial_summary"),
        charts=charts,
    )


@router.get("/analytics/bookings", response_class=HTMLResponse, summary="Booking analytics")
async def booking_analytics(
    request: Request,
    backend: Backend,
    period: str = Query(DEFAULT_PERIOD),
) -> HTMLResponse:
    period = choose(period, PERIODS, DEFAULT_PERIOD)
    payload = await fetch_payload(
        lambda: backend.analytics.bookings({"period": period}), "booking_analytics"
    )
    data = payload.data or {}
    charts = [
        series(data, "booking_trends", "bookings", "date", "Bookings", kind="area"),
        series(data, "booking_trends", "revenue", "date", "Revenue", kind="area"),
        series(data, "popular_time_slots", "bookings", "hour", "Bookings by hour"),
    ]
    return render(
        request,
        "analytics_bookings.html",
        payload=payload,
        data=data,
        charts=charts,
        period=period,
        periods=PERIODS,
        services=rows(data, "service_popularity"),
        locations=rows(data, "geographical_distribution"),
        segments=rows(data, "customer_segments"),
    )


@router.get(
    "/analytics/therapists",
    response_class=HTMLResponse,
    summary="Therapist analytics",
)
async def therapist_analytics(
    request: Request,
    backend: Backend,
    period: str = Query(DEFAULT_PERIOD),
) -> HTMLResponse:
    """Therapist performance, satisfaction and availability."""
    period = choose(period, PERIODS, DEFAULT_PERIOD)
    payload = await fetch_payload(
        lambda: backend.analytics.therapists({"period": period}), "therapist_analytics"
    )
    data = payload.data or {}
    satisfaction = section(data, "customer_satisfaction")
    charts = [
        series(data, "performance_trends", "sessions", "month", "Sessions", kind="line"),
        series(data, "performance_trends", "revenue", "month", "Revenue", kind="line"),
    ]
    if satisfaction:
        charts.append(
            ChartSeries(
                name="Customer satisfaction",
                kind="donut",
                categories=[label for label, _ in RATING_LEVELS],
                data=[to_number(satisfaction.get(key)) for _, key in RATING_LEVELS],
            )
        )
    return render(
        request,
        "analytics_therapists.html",
        payload=payload,
        data=data,
        charts=charts,
        period=period,
        periods=PERIODS,
        top_performers=rows(data, "top_performers"),
        specialties=rows(data, "specialties_distribution"),
        availability=section(data, "availability_stats"),
    )


@router.get("/analytics/advanced", response_class=HTMLResponse, summary="Advanced analytics")
async def advanced_analytics(
    request: Request,
    backend: Backend,
    metric: str = Query(DEFAULT_METRIC),
    period: str = Query(DEFAULT_PERIOD),
) -> HTMLResponse:
    """
    Cohorts, seasonal patterns, geography and forecasts.

    When the backend has nothing to offer the page shows a not-available
    notice instead of empty charts.
    """
    metric = choose(metric, ADVANCED_METRICS, DEFAULT_METRIC)
    period = choose(period, ADVANCED_PERIODS, DEFAULT_PERIOD)
    payload = await fetch_payload(
        lambda: backend.analytics.advanced({"metric": metric, "period": period}),
        "advanced_analytics",
    )
    data = payload.data or {}
    charts = [
        series(
            data,
            "seasonal_patterns.weekly_patterns",
            "bookings",
            "day",
            "Bookings by weekday",
            kind="line",
        ),
        series(
            data,
            "seasonal_patterns.weekly_patterns",
            "avg_value",
            "day",
            "Average value",
            kind="line",
        ),
        series(data, "geographic_heatmap", "revenue", "region", "Revenue by region"),
    ]
    return render(
        request,
        "analytics_advanced.html",
        payload=payload,
        data=data,
        charts=charts,
        metric=metric,
        metrics=ADVANCED_METRICS,
        period=period,
        periods=ADVANCED_PERIODS,
        cohorts=rows(data, "cohort_analysis"),
        segments=rows(data, "advanced_segments"),
        forecast=rows(data, "predictive_insights.demand_forecast"),
        correlations=section(data, "correlation_matrix"),
    )
