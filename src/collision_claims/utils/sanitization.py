"""Input sanitization for free-text claim and message fields."""

import re
from typing import Any

# Maximum lengths for text fields (characters)
MAX_MESSAGE_TEXT = 5000
MAX_NOTES = 2000
MAX_VIN = 32
MAX_VEHICLE_MAKE = 64
MAX_VEHICLE_MODEL = 128
MAX_VEHICLE_TRIM = 64
MAX_INSURANCE_FIELD = 128

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def sanitize_text(text: str | None, max_length: int) -> str:
    """Strip control characters and surrounding whitespace, then truncate to max_length."""
    if text is None or not isinstance(text, str):
        return ""
    cleaned = _CONTROL_CHARS.sub("", text).strip()
    if len(cleaned) > max_length:
        cleaned = cleaned[:max_length]
    return cleaned


def sanitize_vehicle_data(vehicle: dict[str, Any]) -> dict[str, Any]:
    """
    Sanitize a vehicle payload before validation.

    - Truncates make, model, trim and VIN to safe lengths
    - Strips control characters
    - Upper-cases the VIN
    - Leaves numeric fields as-is (validated by pydantic)

    Returns a new dict; does not mutate the input.
    """
    if not vehicle or not isinstance(vehicle, dict):
        return vehicle or {}

    out: dict[str, Any] = {}
    for key, value in vehicle.items():
        if key == "make":
            out[key] = sanitize_text(value, MAX_VEHICLE_MAKE)
        elif key == "model":
            out[key] = sanitize_text(value, MAX_VEHICLE_MODEL)
        elif key == "trim":
            out[key] = sanitize_text(value, MAX_VEHICLE_TRIM) or None
        elif key == "vin":
            out[key] = sanitize_text(value, MAX_VIN).upper() or None
        else:
            out[key] = value
    return out


def sanitize_insurance_data(info: dict[str, Any]) -> dict[str, Any]:
    """Sanitize string fields of an insurance-info payload; other values pass through."""
    if not info or not isinstance(info, dict):
        return info or {}
    return {
        key: sanitize_text(value, MAX_INSURANCE_FIELD) if isinstance(value, str) else value
        for key, value in info.items()
    }
