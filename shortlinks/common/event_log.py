"""Persistent event log kept alongside the records.

``EventLogHandler`` is an ordinary logging handler: registry code logs through
the ``shortlinks`` logger and never waits on, or fails because of, this sink.
"""

import json
import logging
import threading
from collections import deque
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .clock import new_token
from ..errors import PersistenceError
from ..storage.base import BlobStore

LOGS_KEY = "app_logs"


class EventLogHandler(logging.Handler):
    """Collects ``level, message, context`` entries, newest first.

    Up to ``max_entries`` are held in memory and the newest
    ``persisted_entries`` are written to the blob store after every entry.
    """

    def __init__(
        self,
        store: BlobStore,
        key: str = LOGS_KEY,
        max_entries: int = 1000,
        persisted_entries: int = 100,
        level: int = logging.DEBUG,
    ):
        super().__init__(level)
        self.store = store
        self.key = key
        self.max_entries = max_entries
        self.persisted_entries = persisted_entries
        self._entries: deque = deque(maxlen=max_entries)
        self._local = threading.local()
        self._load()

    def _load(self) -> None:
        try:
            blob = self.store.get(self.key)
            stored = json.loads(blob) if blob else []
        except (PersistenceError, ValueError):
            # A broken log blob only costs history
            stored = []
        if isinstance(stored, list):
            self._entries.extend(e for e in stored if isinstance(e, dict))

    def emit(self, record: logging.LogRecord) -> None:
        # A store that logs while writing must not feed back into itself
        if getattr(self._local, "emitting", False):
            return
        self._local.emitting = True
        try:
            created = datetime.fromtimestamp(record.created, timezone.utc)
            entry = {
                "id": new_token(created),
                "timestamp": created.isoformat(),
                "level": record.levelname.lower(),
                "message": record.getMessage(),
                "context": getattr(record, "context", None),
                "logger": record.name,
            }
            self.acquire()
            try:
                self._entries.appendleft(entry)
                snapshot = list(self._entries)[: self.persisted_entries]
            finally:
                self.release()
            self.store.set(self.key, json.dumps(snapshot, default=str))
        except Exception:
            self.handleError(record)
        finally:
            self._local.emitting = False

    def get_entries(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Return log entries, newest first.

        Args:
            limit: Maximum number of entries to return

        Returns:
            List of entry dictionaries
        """
        entries = list(self._entries)
        return entries[:limit] if limit is not None else entries

    def clear(self) -> bool:
        """Drop all entries, in memory and in the store.

        Returns:
            False if the stored copy could not be removed
        """
        self._entries.clear()
        try:
            self.store.delete(self.key)
        except PersistenceError:
            return False
        return True
