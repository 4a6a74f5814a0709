"""Validation utilities for short links."""

import re
from urllib.parse import urlparse
from typing import Any, Tuple

SHORT_CODE_PATTERN = re.compile(r"[A-Za-z0-9]+")
MAX_SHORT_CODE_LENGTH = 20


def is_valid_url(url: Any) -> Tuple[bool, str]:
    """Validate an absolute URL.

    A URL is accepted when it parses with both a scheme and a host. Anything
    that fails to parse is rejected rather than raised.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if any(c.isspace() for c in url):
        return False, "Invalid URL format"

    try:
        result = urlparse(url)
        # Accessing port validates it (raises ValueError when out of range)
        result.port

        if not result.scheme:
            return False, "Invalid URL format: missing scheme"

        if not result.netloc or not result.hostname:
            return False, "Invalid URL format: missing host"

        return True, ""

    except ValueError as e:
        return False, f"Invalid URL format: {str(e)}"


def is_valid_validity(validity_minutes: Any) -> Tuple[bool, str]:
    """Validate a validity period in minutes.

    Args:
        validity_minutes: Number of minutes the link stays valid

    Returns:
        Tuple of (is_valid, error_message)
    """
    # bool is an int subclass; True is not a period
    if isinstance(validity_minutes, bool) or not isinstance(validity_minutes, int):
        return False, "Validity period must be a positive integer"

    if validity_minutes <= 0:
        return False, "Validity period must be a positive integer"

    return True, ""


def is_valid_short_code(short_code: Any, max_length: int = MAX_SHORT_CODE_LENGTH) -> Tuple[bool, str]:
    """Validate a custom short code.

    Args:
        short_code: The short code to validate
        max_length: Maximum length for short code

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code:
        return False, "Custom shortcode is required"

    if not isinstance(short_code, str):
        return False, "Custom shortcode must be alphanumeric"

    if len(short_code) > max_length:
        return False, f"Custom shortcode must be at most {max_length} characters"

    if not SHORT_CODE_PATTERN.fullmatch(short_code):
        return False, "Custom shortcode must be alphanumeric"

    return True, ""
