"""Coupon form schemas."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from roomspa_admin.core.formatting import datetime_input

COUPON_FILTERS = ("all", "active", "inactive")

COUPON_FORM_DEFAULTS: dict[str, Any] = {
    "code": "",
    "name": "",
    "description": "",
    "discount_type": "percentage",
    "discount_value": "",
    "minimum_order_amount": 0,
    "maximum_discount_amount": "",
    "usage_limit": "",
    "is_active": True,
    "valid_from": "",
    "valid_until": "",
}

OPTIONAL_FIELDS = (
    "description",
    "maximum_discount_amount",
    "usage_limit",
    "valid_from",
    "valid_until",
)


class CouponForm(BaseModel):
    """Writable coupon fields as submitted from the create/edit form."""

    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    discount_type: Literal["percentage", "fixed"] = "percentage"
    discount_value: float = Field(..., gt=0)
    minimum_order_amount: float = Field(default=0, ge=0)
    maximum_discount_amount: float | None = Field(default=None, ge=0)
    usage_limit: int | None = Field(default=None, ge=1)
    is_active: bool = True
    valid_from: datetime | None = None
    valid_until: datetime | None = None

    @field_validator("code", mode="before")
    @classmethod
    def normalize_code(cls, v: Any) -> Any:
        """Coupon codes are stored upper-case without surrounding spaces."""
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def check_ranges(self) -> "CouponForm":
        if self.discount_type == "percentage" and self.discount_value > 100:
            raise ValueError("Percentage discount cannot exceed 100")
        if self.valid_from and self.valid_until and self.valid_until <= self.valid_from:
            raise ValueError("Valid until must be after valid from")
        return self

    def to_payload(self) -> dict[str, Any]:
        """JSON body for the create/update endpoints."""
        return self.model_dump(mode="json")


def form_values(form: Mapping[str, Any]) -> dict[str, Any]:
    """Collect submitted values, keeping the raw text for re-rendering."""
    values = dict(COUPON_FORM_DEFAULTS)
    for name in COUPON_FORM_DEFAULTS:
        if name == "is_active":
            continue
        if name in form:
            values[name] = str(form.get(name) or "").strip()
    values["code"] = str(values["code"]).upper()
    values["is_active"] = form.get("is_active") in ("on", "true", "1", True)
    return values


def record_values(coupon: Mapping[str, Any]) -> dict[str, Any]:
    """Seed the edit form from a coupon record."""
    values = dict(COUPON_FORM_DEFAULTS)
    for name in COUPON_FORM_DEFAULTS:
        value = coupon.get(name)
        if value is not None:
            values[name] = value
    values["valid_from"] = datetime_input(coupon.get("valid_from"))
    values["valid_until"] = datetime_input(coupon.get("valid_until"))
    return values


def parse_coupon_form(values: Mapping[str, Any]) -> CouponForm:
    """
    Validate form values.

    Raises:
        ValidationError: If the values do not describe a valid coupon
    """
    cleaned = dict(values)
    for name in OPTIONAL_FIELDS:
        if cleaned.get(name) == "":
            cleaned[name] = None
    if cleaned.get("minimum_order_amount") in ("", None):
        cleaned["minimum_order_amount"] = 0
    return CouponForm.model_validate(cleaned)

