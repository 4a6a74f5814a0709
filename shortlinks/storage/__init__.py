"""Storage layer for short links."""

from .base import BlobStore
from .memory import MemoryBlobStore
from .file import FileBlobStore
from .redis_store import RedisBlobStore
from .models import ClickEvent, ShortLinkRecord
from .repository import RecordRepository, RECORDS_KEY

__all__ = [
    "BlobStore",
    "MemoryBlobStore",
    "FileBlobStore",
    "RedisBlobStore",
    "ClickEvent",
    "ShortLinkRecord",
    "RecordRepository",
    "RECORDS_KEY",
]
