"""Pytest configuration and fixtures."""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Optional

from shortlinks.service import ShortLinkRegistry
from shortlinks.shortcode import ShortCodeGenerator
from shortlinks.location import StaticLocationResolver
from shortlinks.storage import BlobStore, MemoryBlobStore, RecordRepository
from shortlinks.errors import PersistenceError
from shortlinks.common.logging_config import setup_logging


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class CountingStore(MemoryBlobStore):
    """Memory store that counts writes."""

    def __init__(self):
        super().__init__()
        self.writes = 0

    def set(self, key: str, value: str) -> None:
        self.writes += 1
        super().set(key, value)


class FailingStore(BlobStore):
    """Store whose every operation fails."""

    def get(self, key):
        raise PersistenceError("storage unavailable")

    def set(self, key, value):
        raise PersistenceError("storage unavailable")

    def delete(self, key):
        raise PersistenceError("storage unavailable")

    def ping(self):
        return False


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return CountingStore()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
def make_registry(clock, short_code_generator, logger):
    """Build registries over a given store, sharing clock and logger."""

    def _make(store, **kwargs):
        kwargs.setdefault("location_resolver", StaticLocationResolver("Test City"))
        return ShortLinkRegistry(
            repository=RecordRepository(store, logger=logger),
            short_code_generator=kwargs.pop("short_code_generator", short_code_generator),
            logger=logger,
            base_url="http://localhost:3000",
            clock=clock,
            **kwargs,
        )

    return _make


@pytest.fixture
def registry(make_registry, store):
    """Create registry instance."""
    return make_registry(store)


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]


@pytest.fixture
def failing_store():
    return FailingStore()
