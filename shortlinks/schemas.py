"""Pydantic schemas for registry requests and results."""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import ShortLinkError
from .storage.models import ShortLinkRecord


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten")
    custom_code: Optional[str] = Field(None, description="Optional custom short code")
    validity_minutes: Optional[int] = Field(None, description="Minutes the link stays valid")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "https://example.com/very/long/path/to/resource",
                    "custom_code": None,
                    "validity_minutes": 30,
                },
                {
                    "url": "https://github.com/user/repo",
                    "custom_code": "myrepo",
                    "validity_minutes": 1440,
                },
            ]
        }
    }


class BatchOutcome(BaseModel):
    """Result of one item of a batch creation."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    request: ShortenRequest
    record: Optional[ShortLinkRecord] = None
    error: Optional[ShortLinkError] = None

    @property
    def ok(self) -> bool:
        return self.record is not None


class RegistryStatistics(BaseModel):
    """Aggregate numbers over the registry."""

    total_urls: int = Field(..., description="Number of stored links")
    active_urls: int = Field(..., description="Links that have not expired")
    expired_urls: int = Field(..., description="Links past their expiry")
    total_clicks: int = Field(..., description="Clicks recorded across all links")
    clicks_by_source: Dict[str, int] = Field(default_factory=dict)
    clicks_by_location: Dict[str, int] = Field(default_factory=dict)
