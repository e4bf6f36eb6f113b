"""
Validation and sanitization utilities.

This module contains functions for validating submitted travel spots and
sanitizing user input data before it reaches the store.
"""

import math
import re
from typing import Any, Dict, Optional

from fastapi import HTTPException

ALLOWED_SPOT_FIELDS = {
    "name": str,
    "description": str,
    "latitude": float,
    "longitude": float,
    "country": str,
    "city": str,
    "category": str,
}

REQUIRED_SPOT_FIELDS = ("name", "description", "latitude", "longitude")

KNOWN_CATEGORIES = (
    "LANDMARKS",
    "NATURE",
    "BEACH",
    "RESTAURANTS",
    "CITY",
    "CULTURE",
    "OTHER",
)
DEFAULT_CATEGORY = "OTHER"
CATEGORY_PATTERN = re.compile(r"^[A-Z][A-Z0-9_]*$")

MAX_NAME_LEN = 200
MAX_LABEL_LEN = 100
MAX_DESCRIPTION_LEN = 5000


def sanitise_text(value: Any, field: str, *, max_len: int, required: bool = True) -> str:
    """Sanitize and validate a free-text field.

    Args:
        value: Raw field value.
        field: Field name used in error messages.
        max_len: Maximum allowed length after trimming.
        required: Whether an empty value is rejected.

    Returns:
        Trimmed string.

    Raises:
        HTTPException: If the value is missing, not a string, or too long.
    """
    if value is None:
        value = ""
    if not isinstance(value, str):
        raise HTTPException(400, f"Invalid {field}")
    value = value.strip()
    if required and not value:
        raise HTTPException(400, f"Missing {field}")
    if len(value) > max_len:
        raise HTTPException(400, f"{field.capitalize()} too long")
    return value


def sanitise_coordinate(value: Any, field: str, *, limit: float) -> float:
    """Sanitize and validate a latitude or longitude.

    Numeric strings are accepted because form inputs submit text.

    Args:
        value: Raw coordinate value.
        field: Field name used in error messages.
        limit: Absolute bound for the coordinate (90 or 180).

    Returns:
        Coordinate as float.

    Raises:
        HTTPException: If the value is not a finite number within bounds.
    """
    if value is None or isinstance(value, bool):
        raise HTTPException(400, f"Invalid {field}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise HTTPException(400, f"Invalid {field}")
    if not math.isfinite(number):
        raise HTTPException(400, f"Invalid {field}")
    if not -limit <= number <= limit:
        raise HTTPException(400, f"{field.capitalize()} out of range")
    return number


def sanitise_category(value: Optional[str]) -> str:
    """Normalize a category tag.

    Categories are an open set: anything shaped like an upper-case
    identifier is accepted, so new tags do not need a code change.

    Args:
        value: Raw category value.

    Returns:
        Upper-case category, DEFAULT_CATEGORY when empty.

    Raises:
        HTTPException: If the category is not an identifier.
    """
    if value is None:
        return DEFAULT_CATEGORY
    if not isinstance(value, str):
        raise HTTPException(400, "Invalid category")
    value = value.strip().upper()
    if not value:
        return DEFAULT_CATEGORY
    if len(value) > 50 or not CATEGORY_PATTERN.match(value):
        raise HTTPException(400, "Invalid category")
    return value


def validate_spot_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a submitted spot and return clean column values.

    Args:
        payload: Spot fields as posted by the add form (no id or timestamps).

    Returns:
        Dictionary of sanitized fields ready for the TravelSpot model.

    Raises:
        HTTPException: If a field is unknown, missing, or invalid.
    """
    if not isinstance(payload, dict):
        raise HTTPException(400, "Invalid spot payload")

    for key in payload.keys():
        if key not in ALLOWED_SPOT_FIELDS:
            raise HTTPException(400, f"Illegal field: {key}")

    for key in REQUIRED_SPOT_FIELDS:
        if key not in payload:
            raise HTTPException(400, f"Missing {key}")

    return {
        "name": sanitise_text(payload.get("name"), "name", max_len=MAX_NAME_LEN),
        "description": sanitise_text(
            payload.get("description"), "description", max_len=MAX_DESCRIPTION_LEN
        ),
        "latitude": sanitise_coordinate(payload.get("latitude"), "latitude", limit=90.0),
        "longitude": sanitise_coordinate(payload.get("longitude"), "longitude", limit=180.0),
        "country": sanitise_text(
            payload.get("country"), "country", max_len=MAX_LABEL_LEN, required=False
        ),
        "city": sanitise_text(payload.get("city"), "city", max_len=MAX_LABEL_LEN, required=False),
        "category": sanitise_category(payload.get("category")),
    }
