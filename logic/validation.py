"""
Validation and sanitization utilities.

This module validates the payloads clients send over the socket and
sanitizes gratitude text before it is stored.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import bleach

from logic.geo import ViewBounds, is_valid_coordinate, normalise_bounds

MAX_MESSAGE_LEN = 280

# A trailing "&", "&amp", "&#39" etc. left behind by truncation
_PARTIAL_ENTITY = re.compile(r"&[#A-Za-z0-9]*$")


class InvalidPayload(ValueError):
    """Raised when a client payload cannot be accepted."""


@dataclass(frozen=True)
class Submission:
    """A validated submit_gratitude payload."""

    message: str
    lat: float
    lng: float
    temp_id: Optional[Union[str, int, float]] = None


def is_number(value: Any) -> bool:
    """Check for a finite int or float. Booleans do not count."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints too large for a float
        return False


def sanitise_message(value: str, max_length: int = MAX_MESSAGE_LEN) -> str:
    """Escape markup in a message and truncate it.

    No tags are allowed: anything that looks like HTML is escaped rather than
    removed, so the text reads exactly as typed. Truncation happens after
    escaping and never leaves half an entity at the end.

    Args:
        value: Raw message text.
        max_length: Maximum length of the result.

    Returns:
        Sanitized message, possibly empty.
    """
    cleaned = bleach.clean(value, tags=set(), attributes={}, strip=False).strip()
    if len(cleaned) <= max_length:
        return cleaned

    truncated = cleaned[:max_length]
    # bleach escapes every bare "&", so a trailing "&..." without ";" is a cut entity
    tail = _PARTIAL_ENTITY.search(truncated)
    if tail:
        truncated = truncated[:tail.start()]
    return truncated.rstrip()


def parse_submission(payload: Any, max_length: int = MAX_MESSAGE_LEN) -> Submission:
    """Validate a submit_gratitude payload.

    Args:
        payload: Raw event data, expected {message, lat, lng, tempId}.
        max_length: Maximum message length after sanitising.

    Returns:
        Submission with the sanitized message.

    Raises:
        InvalidPayload: If any field is missing, mistyped or out of range.
    """
    if not isinstance(payload, dict):
        raise InvalidPayload("payload must be an object")

    message = payload.get("message")
    lat = payload.get("lat")
    lng = payload.get("lng")

    if not isinstance(message, str):
        raise InvalidPayload("message must be a string")
    if not is_number(lat) or not is_number(lng):
        raise InvalidPayload("lat and lng must be numbers")
    if not is_valid_coordinate(lat, lng):
        raise InvalidPayload(f"coordinates out of range: ({lat}, {lng})")

    clean = sanitise_message(message, max_length)
    if not clean:
        raise InvalidPayload("message is empty")

    temp_id = payload.get("tempId")
    if temp_id is not None and (isinstance(temp_id, bool) or not isinstance(temp_id, (str, int, float))):
        temp_id = None

    return Submission(message=clean, lat=float(lat), lng=float(lng), temp_id=temp_id)


def parse_bounds(payload: Any) -> ViewBounds:
    """Validate a map_bounds payload.

    Args:
        payload: Raw event data, expected {north, south, east, west}.

    Returns:
        Normalised ViewBounds.

    Raises:
        InvalidPayload: If an edge is missing or not a number, or south > north.
    """
    if not isinstance(payload, dict):
        raise InvalidPayload("bounds must be an object")

    edges: Dict[str, float] = {}
    for key in ("north", "south", "east", "west"):
        value = payload.get(key)
        if not is_number(value):
            raise InvalidPayload(f"bounds.{key} must be a number")
        edges[key] = float(value)

    if edges["south"] > edges["north"]:
        raise InvalidPayload("bounds.south is north of bounds.north")

    return normalise_bounds(**edges)
