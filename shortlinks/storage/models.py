"""Data models for short link records."""

from datetime import datetime, timedelta
from typing import Any, Tuple

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from ..common.validators import is_valid_url, is_valid_short_code


class ClickEvent(BaseModel):
    """One recorded visit of a short link."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    id: str
    timestamp: AwareDatetime
    source: str = "direct"
    location: str
    user_agent: str = Field(default="", alias="userAgent")


class ShortLinkRecord(BaseModel):
    """A short link and its click history.

    Only the click history may grow, and it does so by producing a new record
    through ``with_click``; every other field is fixed at construction.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    id: str
    original_url: str = Field(alias="originalURL")
    short_code: str = Field(alias="shortCode")
    short_url: str = Field(alias="shortURL")
    created_at: AwareDatetime = Field(alias="createdAt")
    expires_at: AwareDatetime = Field(alias="expiresAt")
    validity_minutes: int = Field(alias="validityMinutes", gt=0, strict=True)
    clicks: Tuple[ClickEvent, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def drop_stored_total(cls, data: Any) -> Any:
        """The stored click total is derived, so it is recomputed instead of trusted."""
        if isinstance(data, dict):
            data = {k: v for k, v in data.items() if k not in ("totalClicks", "total_clicks")}
        return data

    @field_validator("original_url")
    @classmethod
    def check_original_url(cls, v: str) -> str:
        is_valid, error = is_valid_url(v)
        if not is_valid:
            raise ValueError(error)
        return v

    @field_validator("short_code")
    @classmethod
    def check_short_code(cls, v: str) -> str:
        is_valid, error = is_valid_short_code(v)
        if not is_valid:
            raise ValueError(error)
        return v

    @model_validator(mode="after")
    def check_derived_fields(self) -> "ShortLinkRecord":
        if not self.short_url.endswith(f"/{self.short_code}"):
            raise ValueError("shortURL must end with the short code")
        if self.expires_at - self.created_at != timedelta(minutes=self.validity_minutes):
            raise ValueError("expiresAt must equal createdAt plus validityMinutes")
        return self

    @computed_field(alias="totalClicks")
    @property
    def total_clicks(self) -> int:
        return len(self.clicks)

    def with_click(self, event: ClickEvent) -> "ShortLinkRecord":
        """Return a copy of this record with one more click appended."""
        return self.model_copy(update={"clicks": self.clicks + (event,)})

    def is_expired_at(self, now: datetime) -> bool:
        """A record expiring exactly at ``now`` is still valid."""
        return now > self.expires_at

    def to_dict(self) -> dict:
        """Convert to the serialized (camelCase) dictionary."""
        return self.model_dump(mode="json", by_alias=True)
