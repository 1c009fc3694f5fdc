"""Report and export schemas."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, field_validator, model_validator

EXPORT_TYPES: dict[str, tuple[str, str]] = {
    "bookings": (
        "Bookings Data",
        "Export booking records with customer and therapist details",
    ),
    "users": ("Users Data", "Export user profiles and account information"),
    "revenue": ("Revenue Data", "Export financial data and payment records"),
}


class ExportForm(BaseModel):
    """Export request: data type plus an optional date range."""

    type: Literal["bookings", "users", "revenue"] = "bookings"
    date_from: date | None = None
    date_to: date | None = None

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def blank_as_none(cls, v):
        return None if v == "" else v

    @model_validator(mode="after")
    def check_range(self) -> "ExportForm":
        if self.date_from and self.date_to and self.date_to < self.date_from:
            raise ValueError("End date must not be before start date")
        return self

    def to_params(self) -> dict[str, str | None]:
        return {
            "type": self.type,
            "date_from": self.date_from.isoformat() if self.date_from else None,
            "date_to": self.date_to.isoformat() if self.date_to else None,
        }

    @property
    def filename(self) -> str:
        parts = ["roomspa", self.type]
        if self.date_from:
            parts.append(self.date_from.isoformat())
        if self.date_to:
            parts.append(self.date_to.isoformat())
        return "-".join(parts) + ".csv"
