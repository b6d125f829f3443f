"""Shared utilities used across the MechApp client library."""

from typing import Any, Optional


def normalize_text(value: Optional[Any]) -> str:
    """Trim a form value, treating None as an empty string.

    Examples:
        >>> normalize_text("  Frenos  ")
        'Frenos'
        >>> normalize_text(None)
        ''
    """
    if value is None:
        return ""
    return str(value).strip()


def normalize_email(value: Optional[Any]) -> str:
    """Trim and lowercase an email address the way the backend stores it."""
    return normalize_text(value).lower()


def parse_positive_int(value: Any) -> Optional[int]:
    """Parse a select/option value into a positive integer id.

    Examples:
        >>> parse_positive_int("12")
        12
        >>> parse_positive_int("") is None
        True
        >>> parse_positive_int(0) is None
        True
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    try:
        parsed = int(normalize_text(value))
    except ValueError:
        return None
    return parsed if parsed > 0 else None
