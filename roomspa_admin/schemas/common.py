"""Backend response envelope and shared form helpers."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class Pagination(BaseModel):
    """Pagination block returned inside list payloads."""

    current_page: int = 1
    total_pages: int = 1
    total_count: int = 0
    has_next: bool = False
    has_previous: bool = False

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def from_payload(cls, payload: Any) -> "Pagination":
        """Read ``payload['pagination']`` leniently."""
        raw = payload.get("pagination") if isinstance(payload, dict) else None
        if not isinstance(raw, dict):
            return cls()
        values: dict[str, Any] = {}
        for name in ("current_page", "total_pages", "total_count"):
            try:
                values[name] = max(int(raw[name]), 0)
            except (KeyError, TypeError, ValueError):
                continue
        for name in ("has_next", "has_previous"):
            if name in raw:
                values[name] = bool(raw[name])
        pagination = cls(**values)
        if pagination.total_pages < 1:
            pagination.total_pages = 1
        return pagination


class Envelope(BaseModel):
    """Uniform ``{success, data, message}`` wrapper of every backend call."""

    success: bool = False
    data: Any = None
    message: str | None = None
    status_code: int | None = Field(default=None, description="HTTP status of the response")

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def failure(cls, message: str, status_code: int | None = None) -> "Envelope":
        return cls(success=False, message=message, status_code=status_code)

    def data_dict(self) -> dict[str, Any]:
        """Return ``data`` when it is a mapping, else an empty dict."""
        return self.data if self.success and isinstance(self.data, dict) else {}


def describe_errors(exc: ValidationError) -> str:
    """Flatten validation errors into one sentence for an inline alert."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "__root__")
        message = str(error.get("msg", "invalid value")).removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)
