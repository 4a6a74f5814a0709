"""Short link registry: creation, lookup, expiry and click analytics."""

import logging
import threading
from collections import Counter
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional

from .shortcode import ShortCodeGenerator
from .location import ClickContext, LocationResolver, MockLocationResolver, UNKNOWN_LOCATION
from .schemas import BatchOutcome, RegistryStatistics, ShortenRequest
from .errors import (
    ExpiredError,
    GenerationExhaustedError,
    InvalidShortcodeFormatError,
    InvalidURLError,
    InvalidValidityError,
    NotFoundError,
    ShortcodeConflictError,
    ShortLinkError,
)
from .storage.models import ClickEvent, ShortLinkRecord
from .storage.repository import RecordRepository
from .common.clock import format_time_remaining, new_token, utc_now
from .common.url_builder import build_short_url
from .common.validators import is_valid_short_code, is_valid_url, is_valid_validity

DEFAULT_VALIDITY_MINUTES = 30


class ShortLinkRegistry:
    """Owns the in-memory record collection and its persisted mirror.

    Every mutation is applied and persisted under one lock before the call
    returns, so readers only ever see settled state.
    """

    def __init__(
        self,
        repository: RecordRepository,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        location_resolver: Optional[LocationResolver] = None,
        logger: Optional[logging.Logger] = None,
        base_url: str = "http://localhost:3000",
        path_prefix: str = "",
        max_generation_attempts: int = 100,
        default_validity_minutes: int = DEFAULT_VALIDITY_MINUTES,
        clock: Optional[Callable[[], datetime]] = None,
        user_agent: str = "",
    ):
        """Initialize the registry and load stored records.

        Args:
            repository: Persistence adapter
            short_code_generator: Optional short code generator
            location_resolver: Optional click location resolver
            logger: Optional logger
            base_url: Base URL for short links
            path_prefix: Optional path prefix for short links
            max_generation_attempts: Cap on random draws per auto-generated code
            default_validity_minutes: Validity used when none is given
            clock: Returns the current aware datetime (defaults to UTC now)
            user_agent: Default user agent recorded on clicks
        """
        self.repository = repository
        self.generator = short_code_generator or ShortCodeGenerator()
        self.location_resolver = location_resolver or MockLocationResolver()
        self.logger = logger or logging.getLogger(__name__)
        self.base_url = base_url
        self.path_prefix = path_prefix
        self.max_generation_attempts = max_generation_attempts
        self.default_validity_minutes = default_validity_minutes
        self.clock = clock or utc_now
        self.user_agent = user_agent
        self._lock = threading.RLock()
        self._records: List[ShortLinkRecord] = self.repository.load()

        self.logger.info("URL Service initialized", extra={"context": {"urlCount": len(self._records)}})

    def _fail(self, error: ShortLinkError) -> ShortLinkError:
        self.logger.error(error.message, extra={"context": error.context})
        return error

    def _persist(self) -> None:
        # A failed save only costs durability; the repository has logged it
        self.repository.save(self._records)

    def _index_of(self, short_code: str) -> Optional[int]:
        for i, record in enumerate(self._records):
            if record.short_code == short_code:
                return i
        return None

    def _index_of_id(self, record_id: str) -> Optional[int]:
        for i, record in enumerate(self._records):
            if record.id == record_id:
                return i
        return None

    def _code_exists(self, short_code: str) -> bool:
        return self._index_of(short_code) is not None

    def create_short_url(
        self,
        original_url: str,
        custom_code: Optional[str] = None,
        validity_minutes: Optional[int] = None,
    ) -> ShortLinkRecord:
        """Create a new short link.

        Args:
            original_url: The original long URL
            custom_code: Optional custom short code (empty means auto-generate)
            validity_minutes: Minutes the link stays valid (registry default if None)

        Returns:
            The stored record

        Raises:
            InvalidURLError: If the URL is malformed
            InvalidValidityError: If validity is not a positive integer
            InvalidShortcodeFormatError: If the custom code is malformed
            ShortcodeConflictError: If the custom code already exists
            GenerationExhaustedError: If no free code was found
        """
        if validity_minutes is None:
            validity_minutes = self.default_validity_minutes

        self.logger.info(
            "Creating short URL",
            extra={"context": {
                "originalURL": original_url,
                "customShortCode": custom_code,
                "validityMinutes": validity_minutes,
            }},
        )

        is_valid, error = is_valid_url(original_url)
        if not is_valid:
            raise self._fail(InvalidURLError(error, {"originalURL": original_url}))

        is_valid, error = is_valid_validity(validity_minutes)
        if not is_valid:
            raise self._fail(InvalidValidityError(error, {"validityMinutes": validity_minutes}))

        try:
            validity = timedelta(minutes=validity_minutes)
            self.clock() + validity
        except OverflowError:
            raise self._fail(InvalidValidityError(
                "Validity period is too large", {"validityMinutes": validity_minutes}
            ))

        with self._lock:
            if custom_code:
                is_valid, error = is_valid_short_code(custom_code)
                if not is_valid:
                    raise self._fail(InvalidShortcodeFormatError(error, {"customShortCode": custom_code}))

                if self._code_exists(custom_code):
                    raise self._fail(ShortcodeConflictError(
                        "Custom shortcode already exists", {"customShortCode": custom_code}
                    ))

                short_code = custom_code
            else:
                short_code = self._generate_unique_short_code()

            created_at = self.clock()
            record = ShortLinkRecord(
                id=new_token(created_at),
                original_url=original_url,
                short_code=short_code,
                short_url=build_short_url(short_code, self.base_url, self.path_prefix),
                created_at=created_at,
                expires_at=created_at + validity,
                validity_minutes=validity_minutes,
            )

            self._records.append(record)
            self._persist()

        self.logger.info(
            "Short URL created successfully",
            extra={"context": {"shortCode": short_code, "originalURL": original_url}},
        )
        return record

    def create_batch(self, requests: Iterable[ShortenRequest]) -> List[BatchOutcome]:
        """Create several short links; a failed item never aborts the others.

        Args:
            requests: Items to shorten, processed in order

        Returns:
            One outcome per request, in request order
        """
        outcomes = []
        for request in requests:
            try:
                record = self.create_short_url(
                    request.url,
                    custom_code=request.custom_code,
                    validity_minutes=request.validity_minutes,
                )
                outcomes.append(BatchOutcome(request=request, record=record))
            except ShortLinkError as e:
                outcomes.append(BatchOutcome(request=request, error=e))

        succeeded = sum(1 for o in outcomes if o.ok)
        self.logger.info(
            "Batch shortening finished",
            extra={"context": {"count": succeeded, "failed": len(outcomes) - succeeded}},
        )
        return outcomes

    def get_by_short_code(self, short_code: str) -> Optional[ShortLinkRecord]:
        """Find a record by its short code.

        Args:
            short_code: The short code to lookup

        Returns:
            The record, or None if not found
        """
        with self._lock:
            index = self._index_of(short_code)
            record = self._records[index] if index is not None else None

        if record is None:
            self.logger.warning("URL not found by short code", extra={"context": {"shortCode": short_code}})
        else:
            self.logger.info(
                "URL found by short code",
                extra={"context": {"shortCode": short_code, "originalURL": record.original_url}},
            )
        return record

    def is_expired(self, record: ShortLinkRecord) -> bool:
        return record.is_expired_at(self.clock())

    def expiry_status(self, record: ShortLinkRecord) -> str:
        """Describe how long a record stays valid, e.g. "3h 5m remaining"."""
        if self.is_expired(record):
            return "Expired"
        return format_time_remaining(record.expires_at - self.clock())

    async def _resolve_location(self, context: ClickContext) -> str:
        try:
            location = await self.location_resolver.resolve(context)
        except Exception as e:
            self.logger.error("Failed to get location data", extra={"context": {"error": str(e)}})
            return UNKNOWN_LOCATION
        return location or UNKNOWN_LOCATION

    async def record_click(
        self,
        short_code: str,
        source: str = "direct",
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> ShortLinkRecord:
        """Record a click on a live short link.

        Args:
            short_code: The short code that was followed
            source: Where the click came from
            user_agent: Caller user agent (defaults to the registry's)
            ip_address: Optional caller address for location lookup

        Returns:
            The updated record

        Raises:
            NotFoundError: If the code is unknown
            ExpiredError: If the link has expired; no click is recorded
        """
        self.logger.info("Recording click", extra={"context": {"shortCode": short_code, "source": source}})

        record = self.get_by_short_code(short_code)
        if record is None:
            raise self._fail(NotFoundError("URL not found", {"shortCode": short_code}))

        if self.is_expired(record):
            raise self._fail(ExpiredError(
                "URL has expired",
                {"shortCode": short_code, "expiresAt": record.expires_at.isoformat()},
            ))

        if user_agent is None:
            user_agent = self.user_agent
        location = await self._resolve_location(
            ClickContext(source=source, user_agent=user_agent, ip_address=ip_address)
        )

        with self._lock:
            # Swept, replaced or expired while the location was resolving
            index = self._index_of_id(record.id)
            if index is None:
                raise self._fail(NotFoundError("URL not found", {"shortCode": short_code}))

            now = self.clock()
            if self._records[index].is_expired_at(now):
                raise self._fail(ExpiredError(
                    "URL has expired",
                    {"shortCode": short_code, "expiresAt": record.expires_at.isoformat()},
                ))

            event = ClickEvent(
                id=new_token(now),
                timestamp=now,
                source=source,
                location=location,
                user_agent=user_agent,
            )
            updated = self._records[index].with_click(event)
            self._records[index] = updated
            self._persist()

        self.logger.info(
            "Click recorded successfully",
            extra={"context": {"shortCode": short_code, "totalClicks": updated.total_clicks}},
        )
        return updated

    async def resolve(
        self,
        short_code: str,
        source: str = "direct",
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> str:
        """Follow a short link: record the click and return the redirect target.

        Raises:
            NotFoundError: If the code is unknown
            ExpiredError: If the link has expired
        """
        record = await self.record_click(
            short_code, source=source, user_agent=user_agent, ip_address=ip_address
        )
        self.logger.info(
            "Redirecting to original URL",
            extra={"context": {"shortCode": short_code, "originalURL": record.original_url}},
        )
        return record.original_url

    def get_all(self) -> List[ShortLinkRecord]:
        """Return all records, most recently created first."""
        with self._lock:
            records = sorted(self._records, key=lambda r: r.created_at, reverse=True)
        self.logger.info("Retrieving all URLs", extra={"context": {"count": len(records)}})
        return records

    def sweep_expired(self) -> int:
        """Delete every expired record.

        Returns:
            Number of records removed
        """
        with self._lock:
            now = self.clock()
            kept = [r for r in self._records if not r.is_expired_at(now)]
            deleted_count = len(self._records) - len(kept)

            if deleted_count > 0:
                self._records = kept
                self._persist()

        if deleted_count > 0:
            self.logger.info("Expired URLs cleaned up", extra={"context": {"deletedCount": deleted_count}})
        return deleted_count

    def get_statistics(self) -> RegistryStatistics:
        """Get registry statistics.

        Returns:
            Counts of links and clicks
        """
        with self._lock:
            now = self.clock()
            records = list(self._records)

        expired = sum(1 for r in records if r.is_expired_at(now))
        by_source: Counter = Counter()
        by_location: Counter = Counter()
        for record in records:
            for click in record.clicks:
                by_source[click.source] += 1
                by_location[click.location] += 1

        return RegistryStatistics(
            total_urls=len(records),
            active_urls=len(records) - expired,
            expired_urls=expired,
            total_clicks=sum(r.total_clicks for r in records),
            clicks_by_source=dict(by_source),
            clicks_by_location=dict(by_location),
        )

    def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        try:
            storage_healthy = self.repository.store.ping()
        except Exception as e:
            self.logger.error(f"Storage health check failed: {e}")
            storage_healthy = False

        return {
            "storage": storage_healthy,
            "overall": storage_healthy,
        }

    def _generate_unique_short_code(self) -> str:
        """Draw random codes until one is not in the registry.

        Raises:
            GenerationExhaustedError: If every attempt collided
        """
        for attempt in range(self.max_generation_attempts):
            code = self.generator.generate_random()

            if not self._code_exists(code):
                if attempt:
                    self.logger.debug(f"Generated code after {attempt + 1} attempts: {code}")
                return code

        raise self._fail(GenerationExhaustedError(
            "Unable to generate unique short code after multiple attempts",
            {"attempts": self.max_generation_attempts},
        ))

    async def close(self) -> None:
        """Close store and resolver connections."""
        await self.location_resolver.close()
        self.repository.store.close()
