"""
Activity log payloads

A payload is a JSON object: string keys, values are None, bool, int, str,
list or nested object. Decimals are stored as strings ("3000000.00") and
datetimes/dates as ISO strings. A flat object has depth 1; every nested
list/object adds one level. Payloads deeper than max_depth are rejected.
"""
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from app.utils.money import money_str

DEFAULT_MAX_DEPTH = 4

# Activity descriptions written by the API
ACTIVITY_USER_REGISTERED = "User registered"
ACTIVITY_USER_LOGGED_IN = "User logged in"
ACTIVITY_USER_LOGGED_OUT = "User logged out"
ACTIVITY_SAVING_CREATED = "Created new saving"
ACTIVITY_SAVING_UPDATED = "Updated saving"
ACTIVITY_SAVING_DELETED = "Deleted saving"
ACTIVITY_WISH_CREATED = "Created new wish"
ACTIVITY_WISH_UPDATED = "Updated wish"
ACTIVITY_WISH_DELETED = "Deleted wish"


class ActivityPayloadError(ValueError):
    """Payload cannot be stored as an activity log entry"""
    pass


def normalize_payload(payload: dict | None, max_depth: int = DEFAULT_MAX_DEPTH) -> dict | None:
    """
    Convert a payload into its stored JSON form.

    Raises:
        ActivityPayloadError: not an object, non-string key, unsupported
            value type, or nesting deeper than max_depth
    """
    if payload is None:
        return None
    if not isinstance(payload, dict):
        raise ActivityPayloadError("Payload must be an object")
    return _normalize(payload, level=1, max_depth=max_depth)


def _normalize(value: Any, level: int, max_depth: int) -> Any:
    if isinstance(value, dict):
        if level > max_depth:
            raise ActivityPayloadError(f"Payload nesting exceeds {max_depth} levels")
        result = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise ActivityPayloadError(f"Payload keys must be strings, got {type(key).__name__}")
            result[key] = _normalize(item, level + 1, max_depth)
        return result

    if isinstance(value, (list, tuple)):
        if level > max_depth:
            raise ActivityPayloadError(f"Payload nesting exceeds {max_depth} levels")
        return [_normalize(item, level + 1, max_depth) for item in value]

    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, (Decimal, float)):
        return _amount_str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()

    raise ActivityPayloadError(f"Unsupported payload value type: {type(value).__name__}")


def _amount_str(value: Decimal | float) -> str:
    """Finite amount as a 2-digit string"""
    if isinstance(value, float):
        value = Decimal(str(value))
    if not value.is_finite():
        raise ActivityPayloadError(f"Payload amount must be finite, got {value}")
    try:
        return money_str(value)
    except InvalidOperation:
        raise ActivityPayloadError(f"Payload amount out of range: {value}")
