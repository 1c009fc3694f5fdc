"""Declarative chart series projected from analytics payloads.

No aggregation happens here. A series is a direct projection of one field
over a payload array; a missing array gives an empty series.
"""

from typing import Any

from pydantic import BaseModel, Field

from roomspa_admin.core.formatting import lookup, to_number

PERIODS: dict[str, str] = {
    "week": "This Week",
    "month": "This Month",
    "quarter": "This Quarter",
    "year": "This Year",
}
DEFAULT_PERIOD = "month"

ADVANCED_METRICS: dict[str, str] = {
    "revenue": "Revenue Analysis",
    "customer": "Customer Analysis",
    "operational": "Operational Analysis",
}
ADVANCED_PERIODS: dict[str, str] = {
    "month": "Last Month",
    "quarter": "Last Quarter",
    "year": "Last Year",
}
DEFAULT_METRIC = "revenue"


def choose(value: str | None, options: dict[str, str], default: str) -> str:
    """Return ``value`` if it is a known option, else the default."""
    return value if value in options else default


class ChartSeries(BaseModel):
    """One named series with its category labels."""

    name: str
    kind: str = "bar"
    categories: list[str] = Field(default_factory=list)
    data: list[float] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.data


def rows(payload: Any, path: str) -> list[dict[str, Any]]:
    """Return the list at ``path`` inside the payload, keeping only mappings."""
    value = lookup(payload, path) if path else payload
    if not isinstance(value, list):
        return []
    return [row for row in value if isinstance(row, dict)]


def section(payload: Any, path: str) -> dict[str, Any]:
    """Return the mapping at ``path`` inside the payload, or an empty dict."""
    value = lookup(payload, path)
    return value if isinstance(value, dict) else {}


def project(records: list[dict[str, Any]], field: str) -> list[float]:
    """Pick one numeric field from each record."""
    return [to_number(record.get(field)) for record in records]


def labels(records: list[dict[str, Any]], field: str) -> list[str]:
    return [str(record.get(field, "")) for record in records]


def series(
    payload: Any,
    path: str,
    value_field: str,
    label_field: str,
    name: str,
    kind: str = "bar",
) -> ChartSeries:
    """Build a series from ``payload[path][*][value_field]``."""
    records = rows(payload, path)
    return ChartSeries(
        name=name,
        kind=kind,
        categories=labels(records, label_field),
        data=project(records, value_field),
    )
