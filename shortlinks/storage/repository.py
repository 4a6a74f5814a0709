"""Persistence adapter mirroring the registry to a blob store."""

import logging
from typing import List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from .base import BlobStore
from .models import ShortLinkRecord
from ..errors import PersistenceError

RECORDS_KEY = "shortened_urls"

_records_adapter = TypeAdapter(List[ShortLinkRecord])


class RecordRepository:
    """Loads and saves the full record collection as one JSON blob.

    Neither operation raises: a failed load yields an empty collection and a
    failed save is logged and dropped.
    """

    def __init__(
        self,
        store: BlobStore,
        key: str = RECORDS_KEY,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.key = key
        self.logger = logger or logging.getLogger(__name__)

    def load(self) -> List[ShortLinkRecord]:
        """Load every stored record.

        Returns:
            Stored records, or an empty list if missing or unreadable
        """
        try:
            blob = self.store.get(self.key)
        except PersistenceError as e:
            self.logger.error(
                "Failed to load URLs from storage",
                extra={"context": {"key": self.key, "error": str(e)}},
            )
            return []

        if not blob:
            self.logger.info("URLs loaded from storage", extra={"context": {"count": 0}})
            return []

        try:
            records = _records_adapter.validate_json(blob)
        except ValidationError as e:
            self.logger.error(
                "Failed to load URLs from storage",
                extra={"context": {"key": self.key, "error": f"{e.error_count()} validation errors"}},
            )
            return []

        self.logger.info("URLs loaded from storage", extra={"context": {"count": len(records)}})
        return records

    def save(self, records: Sequence[ShortLinkRecord]) -> bool:
        """Persist the full record collection.

        Args:
            records: All records currently in the registry

        Returns:
            True if the write succeeded
        """
        try:
            blob = _records_adapter.dump_json(list(records), by_alias=True).decode("utf-8")
            self.store.set(self.key, blob)
        except (PersistenceError, ValueError) as e:
            self.logger.error(
                "Failed to save URLs to storage",
                extra={"context": {"key": self.key, "error": str(e)}},
            )
            return False

        self.logger.info("URLs saved to storage", extra={"context": {"count": len(records)}})
        return True
