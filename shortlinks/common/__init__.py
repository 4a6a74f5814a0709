"""Common utilities for shortlinks."""

from .validators import is_valid_url, is_valid_short_code, is_valid_validity
from .url_builder import build_short_url
from .clock import utc_now, format_time_remaining

__all__ = [
    "is_valid_url",
    "is_valid_short_code",
    "is_valid_validity",
    "build_short_url",
    "utc_now",
    "format_time_remaining",
]
