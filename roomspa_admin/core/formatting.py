"""Display formatting helpers, also registered as template filters."""

import json
from datetime import datetime
from typing import Any

DATETIME_INPUT_FORMAT = "%Y-%m-%dT%H:%M"


def to_number(value: Any, default: float = 0.0) -> float:
    """Coerce a loosely typed payload value to a float."""
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def format_currency(value: Any, symbol: str = "$") -> str:
    """Format an amount as ``$1,234.50``."""
    amount = to_number(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_number(value: Any) -> str:
    """Format with thousands separators, dropping a zero fraction."""
    number = to_number(value)
    if number.is_integer():
        return f"{int(number):,}"
    return f"{number:,.2f}"


def format_percent(value: Any, digits: int = 1) -> str:
    """Format a value that is already a percentage."""
    number = to_number(value)
    if number.is_integer():
        return f"{int(number)}%"
    return f"{number:.{digits}f}%"


def ratio_percent(part: Any, whole: Any) -> float:
    """Return ``part / whole`` as a percentage clamped to 0..100."""
    denominator = to_number(whole)
    if denominator <= 0:
        return 0.0
    return max(0.0, min(100.0, to_number(part) / denominator * 100))


def parse_datetime(value: Any) -> datetime | None:
    """Parse ISO or ``YYYY-MM-DD HH:MM:SS`` strings; return None otherwise."""
    if isinstance(value, datetime):
        return value
    if not value or not isinstance(value, str):
        return None
    text = value.strip().replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%d"):
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def format_date(value: Any, fmt: str = "%b %d, %Y") -> str:
    parsed = parse_datetime(value)
    return parsed.strftime(fmt) if parsed else ""


def format_datetime(value: Any) -> str:
    return format_date(value, "%b %d, %Y %H:%M")


def datetime_input(value: Any) -> str:
    """Format a timestamp for an ``<input type="datetime-local">``."""
    return format_date(value, DATETIME_INPUT_FORMAT)


def lookup(record: Any, path: str, default: Any = None) -> Any:
    """Read a dotted path from nested dicts without raising."""
    current = record
    for part in path.split("."):
        if not isinstance(current, dict):
            return default
        current = current.get(part)
        if current is None:
            return default
    return current


def normalize_services(value: Any) -> list[str]:
    """
    Turn a booking ``services`` value into display labels.

    Lists and maps are used as they are. A string is decoded only when it is
    valid JSON; anything else is shown verbatim as a single label.
    """
    if value is None or value == "":
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return [value]
    if isinstance(value, dict):
        return [
            f"{name} ({detail})" if detail not in (None, "") else str(name)
            for name, detail in value.items()
        ]
    if isinstance(value, list | tuple):
        labels = []
        for entry in value:
            if isinstance(entry, dict):
                labels.append(str(entry.get("name") or entry.get("service") or entry))
            else:
                labels.append(str(entry))
        return labels
    return [str(value)]


TEMPLATE_FILTERS = {
    "currency": format_currency,
    "number": format_number,
    "percent": format_percent,
    "date": format_date,
    "datetime": format_datetime,
    "datetime_input": datetime_input,
    "services": normalize_services,
}
