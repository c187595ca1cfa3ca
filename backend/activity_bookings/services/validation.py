"""
Field-level checks shared by the service validators.

Validators work on the raw JSON body (a mapping with camelCase keys) so that
they can report every problem at once instead of stopping at the first.
"""

import math
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from pydantic import BaseModel

from activity_bookings.core.exceptions import FieldError

BODY_ERROR = FieldError(field="body", message="Request body must be a valid JSON object")


def as_payload(data: Any) -> Optional[Mapping[str, Any]]:
    """Return `data` as a mapping, or None if it is not an object."""
    if isinstance(data, BaseModel):
        return data.model_dump(by_alias=True, exclude_unset=True)
    if isinstance(data, Mapping):
        return data
    return None


def is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def is_whole_number(value: Any) -> bool:
    return is_number(value) and float(value).is_integer()


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def parse_iso_datetime(value: str) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp; naive values are taken as UTC."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current time as an ISO string with millisecond precision and a Z suffix."""
    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")
