"""Push notification schemas."""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

AUDIENCES: dict[str, str] = {
    "all": "All Users",
    "customers": "Customers Only",
    "therapists": "Therapists Only",
}


class NotificationForm(BaseModel):
    """Broadcast composed on the notifications page."""

    title: str = Field(..., min_length=1, max_length=100)
    message: str = Field(..., min_length=1, max_length=500)
    user_type: Literal["all", "customers", "therapists"] = "all"

    @field_validator("title", "message", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


def recipient_count(tokens: list[Any], user_type: str) -> int:
    """Number of registered devices for an audience."""
    for entry in tokens:
        if isinstance(entry, dict) and entry.get("user_type") == user_type:
            try:
                return int(entry.get("count") or 0)
            except (TypeError, ValueError):
                return 0
    return 0
