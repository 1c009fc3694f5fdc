"""CSV rendering of export payloads."""

import csv
import io
import json
from collections.abc import Iterable, Mapping
from typing import Any

# Leading characters that spreadsheet applications evaluate as formulas
FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r")


def export_rows(data: Any, export_type: str) -> list[dict[str, Any]]:
    """
    Locate the row list of an export payload.

    The rows may be the payload itself, or sit under ``data``, ``rows`` or
    the export type name.
    """
    if isinstance(data, list):
        return [row for row in data if isinstance(row, Mapping)]
    if isinstance(data, Mapping):
        for key in ("data", "rows", export_type):
            value = data.get(key)
            if isinstance(value, list):
                return [row for row in value if isinstance(row, Mapping)]
    return []


def safe_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        text = json.dumps(value, default=str)
    else:
        text = str(value)
    if text.startswith(FORMULA_PREFIXES):
        return "'" + text
    return text


def columns(rows: Iterable[Mapping[str, Any]]) -> list[str]:
    """Union of row keys in first-seen order."""
    seen: dict[str, None] = {}
    for row in rows:
        for key in row:
            seen.setdefault(str(key), None)
    return list(seen)


def rows_to_csv(rows: list[Mapping[str, Any]]) -> str:
    """Render rows as CSV with a header line; missing cells are blank."""
    header = columns(rows)
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(header)
    for row in rows:
        writer.writerow([safe_cell(row.get(key)) for key in header])
    return buffer.getvalue()
