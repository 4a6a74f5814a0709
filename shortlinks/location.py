"""Location lookup for click analytics.

A resolver turns the context of a click into a display label such as
"London, UK". Lookups are best effort: the registry substitutes
``UNKNOWN_LOCATION`` whenever a resolver fails.
"""

import random
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

import httpx

UNKNOWN_LOCATION = "Unknown Location"

MOCK_LOCATIONS = (
    "New York, US",
    "London, UK",
    "Tokyo, JP",
    "Sydney, AU",
    "Berlin, DE",
    "Toronto, CA",
    "Mumbai, IN",
    "São Paulo, BR",
)


@dataclass
class ClickContext:
    """What is known about a click when its location is resolved."""

    source: str = "direct"
    user_agent: str = ""
    ip_address: Optional[str] = None


class LocationResolver(ABC):
    """Resolves a display label for a click."""

    @abstractmethod
    async def resolve(self, context: ClickContext) -> str:
        """Resolve a location label.

        Args:
            context: The click being recorded

        Returns:
            Location label
        """
        pass

    async def close(self) -> None:
        """Release resolver resources."""
        pass


class MockLocationResolver(LocationResolver):
    """Returns a random city; stands in for a real geolocation backend."""

    def __init__(self, locations: Sequence[str] = MOCK_LOCATIONS):
        self.locations = tuple(locations)

    async def resolve(self, context: ClickContext) -> str:
        return random.choice(self.locations)


class StaticLocationResolver(LocationResolver):
    """Always returns the same label."""

    def __init__(self, label: str = UNKNOWN_LOCATION):
        self.label = label

    async def resolve(self, context: ClickContext) -> str:
        return self.label


class HttpLocationResolver(LocationResolver):
    """Looks up the click's IP address with an HTTP geolocation API.

    The API is queried at ``{api_url}/{ip}`` and must answer with JSON holding
    ``city`` and ``countryCode`` (the ip-api.com layout).
    """

    def __init__(
        self,
        api_url: str = "http://ip-api.com/json",
        timeout_seconds: float = 2.0,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize HTTP resolver.

        Args:
            api_url: Base URL of the geolocation API
            timeout_seconds: Request timeout
            client: Optional pre-built client
            logger: Optional logger instance
        """
        self.api_url = api_url.rstrip("/")
        self.logger = logger or logging.getLogger(__name__)
        self.client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def resolve(self, context: ClickContext) -> str:
        if not context.ip_address:
            return UNKNOWN_LOCATION

        response = await self.client.get(f"{self.api_url}/{context.ip_address}")
        response.raise_for_status()
        data = response.json()

        city = data.get("city")
        country = data.get("countryCode") or data.get("country")
        parts = [p for p in (city, country) if p]
        if not parts:
            self.logger.debug(f"No location data for {context.ip_address}")
            return UNKNOWN_LOCATION
        return ", ".join(parts)

    async def close(self) -> None:
        await self.client.aclose()
