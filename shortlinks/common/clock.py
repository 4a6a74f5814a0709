"""Time helpers and token generation."""

import random
from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_token(now: datetime) -> str:
    """Build a time + random identifier, e.g. ``1767225600000-3fa9c2d1``."""
    millis = int(now.timestamp() * 1000)
    return f"{millis}-{random.getrandbits(32):08x}"


def format_time_remaining(remaining: timedelta) -> str:
    """Render the time left before expiry.

    Args:
        remaining: Time until expiry (negative once expired)

    Returns:
        "Expired", or e.g. "1d 2h remaining", "3h 5m remaining", "12m remaining"
    """
    if remaining < timedelta(0):
        return "Expired"

    minutes = int(remaining.total_seconds() // 60)
    hours = minutes // 60
    days = hours // 24

    if days > 0:
        return f"{days}d {hours % 24}h remaining"
    if hours > 0:
        return f"{hours}h {minutes % 60}m remaining"
    return f"{minutes}m remaining"
