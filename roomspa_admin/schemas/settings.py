"""Application settings managed from the Settings page."""

from collections.abc import Mapping
from copy import deepcopy
from typing import Any

from pydantic import TypeAdapter, ValidationError

SETTINGS_TABS: dict[str, str] = {
    "general": "General",
    "notifications": "Notifications",
    "security": "Security",
    "payments": "Payments",
    "appearance": "Appearance",
    "integrations": "Integrations",
}

DEFAULT_SETTINGS: dict[str, dict[str, Any]] = {
    "general": {
        "business_name": "RoomSpa",
        "business_email": "",
        "business_phone": "",
        "business_address": "",
        "timezone": "America/New_York",
        "currency": "USD",
        "language": "en",
    },
    "notifications": {
        "email_notifications": True,
        "sms_notifications": True,
        "push_notifications": True,
        "booking_alerts": True,
        "payment_alerts": True,
        "system_alerts": True,
        "marketing_emails": False,
    },
    "security": {
        "two_factor_auth": False,
        "session_timeout": 30,
        "password_expiry": 90,
        "login_attempts": 5,
        "api_access": True,
    },
    "payments": {
        "stripe_publishable_key": "",
        "stripe_secret_key": "",
        "processing_fee": 2.9,
        "auto_capture": True,
        "refund_policy": 24,
    },
    "appearance": {
        "primary_color": "#9E39BF",
        "secondary_color": "#06b6d4",
        "logo_url": "",
        "favicon_url": "",
        "theme": "light",
    },
    "integrations": {
        "google_calendar": False,
        "mailchimp_api_key": "",
        "twilio_sid": "",
        "twilio_token": "",
        "google_analytics": "",
    },
}

TIMEZONES: dict[str, str] = {
    "America/New_York": "Eastern Time",
    "America/Chicago": "Central Time",
    "America/Denver": "Mountain Time",
    "America/Los_Angeles": "Pacific Time",
}


def merge_settings(current: Any) -> dict[str, dict[str, Any]]:
    """Overlay backend settings on the defaults, section by section."""
    merged = deepcopy(DEFAULT_SETTINGS)
    if not isinstance(current, Mapping):
        return merged
    for section, values in current.items():
        if not isinstance(values, Mapping):
            continue
        merged.setdefault(section, {}).update(values)
    return merged


_NUMBER_ADAPTERS: dict[type, TypeAdapter] = {int: TypeAdapter(int), float: TypeAdapter(float)}


class SettingsFormError(ValueError):
    """
    Raised when submitted settings cannot be saved.

    Attributes:
        errors: One ``section.key: message`` entry per rejected field
        values: Settings as submitted, with rejected fields left as typed
    """

    def __init__(self, errors: list[str], values: dict[str, dict[str, Any]]):
        super().__init__("; ".join(errors))
        self.errors = errors
        self.values = values


def _coerce(raw: str, default: Any) -> Any:
    if isinstance(default, bool):
        return raw in ("on", "true", "1")
    adapter = _NUMBER_ADAPTERS.get(type(default))
    if adapter is not None:
        return adapter.validate_python(raw.strip())
    return raw.strip()


def parse_settings_form(
    form: Mapping[str, Any], base: Mapping[str, Mapping[str, Any]]
) -> dict[str, dict[str, Any]]:
    """
    Build the full settings object from ``section.key`` form fields.

    Checkboxes are absent from the form when unchecked, so every boolean of
    a submitted section is reset before the posted values are applied.

    Args:
        form: Submitted form fields
        base: Settings the form was rendered from

    Returns:
        Complete settings object to send to the backend

    Raises:
        SettingsFormError: If a numeric field does not hold a number
    """
    result = merge_settings(base)
    errors = []
    for section, values in result.items():
        section_posted = any(str(name).startswith(f"{section}.") for name in form)
        for key, current in values.items():
            name = f"{section}.{key}"
            default = DEFAULT_SETTINGS.get(section, {}).get(key, current)
            if isinstance(default, bool):
                if section_posted:
                    values[key] = _coerce(str(form.get(name, "")), default)
                continue
            if name not in form:
                continue
            raw = str(form.get(name) or "")
            try:
                values[key] = _coerce(raw, default)
            except ValidationError:
                values[key] = raw
                kind = "a whole number" if isinstance(default, int) else "a number"
                errors.append(f"{name}: must be {kind}")
    if errors:
        raise SettingsFormError(errors, result)
    return result
