"""
Input validation utilities for the Google Slides tools.
Validates identifiers, enum-like choices and numeric ranges before any remote call.
"""

import re
from typing import Iterable, Optional

from gslides_mcp.utils.exceptions import InvalidArgumentError


PRESENTATION_URL_PATTERNS = [
    re.compile(r'/presentation/d/([a-zA-Z0-9-_]+)'),
    re.compile(r'docs\.google\.com/presentation.*[?&]id=([a-zA-Z0-9-_]+)'),
]


def validate_presentation_id(presentation_id: Optional[str]) -> str:
    """
    Validate a presentation reference.

    Accepts a bare ID or a Google Slides URL.

    Args:
        presentation_id: Presentation ID or URL

    Returns:
        Bare presentation ID

    Raises:
        InvalidArgumentError: If the reference is empty
    """
    if not presentation_id or not presentation_id.strip():
        raise InvalidArgumentError("presentation_id is required", field="presentation_id")

    presentation_id = presentation_id.strip()
    for pattern in PRESENTATION_URL_PATTERNS:
        match = pattern.search(presentation_id)
        if match:
            return match.group(1)

    return presentation_id


def validate_required_text(value: Optional[str], field: str) -> str:
    """
    Validate that a text field is present and not blank.

    Args:
        value: Field value
        field: Field name used in the error

    Returns:
        The value unchanged

    Raises:
        InvalidArgumentError: If the value is missing or blank
    """
    if value is None or not value.strip():
        raise InvalidArgumentError(f"{field} is required", field=field)
    return value


def validate_choice(value: Optional[str], allowed: Iterable[str], field: str, upper: bool = True) -> str:
    """
    Normalize and validate an enum-like string, case-insensitively.

    Args:
        value: Raw value
        allowed: Allowed normalized values
        field: Field name used in the error
        upper: Normalize to upper case (otherwise lower case)

    Returns:
        Normalized value

    Raises:
        InvalidArgumentError: If the value is not one of the allowed values
    """
    allowed = list(allowed)
    normalized = (value or "").strip()
    normalized = normalized.upper() if upper else normalized.lower()
    if normalized not in allowed:
        raise InvalidArgumentError(
            f"invalid {field} '{value}': must be one of {', '.join(allowed)}",
            field=field,
            value=value
        )
    return normalized


def validate_positive(value: Optional[float], field: str) -> float:
    """Validate that a number is present and strictly positive."""
    if value is None or value <= 0:
        raise InvalidArgumentError(f"{field} must be positive", field=field, value=value)
    return value


def validate_non_negative(value: Optional[float], field: str) -> float:
    """Validate that a number is present and not negative."""
    if value is None or value < 0:
        raise InvalidArgumentError(f"{field} must be non-negative", field=field, value=value)
    return value
