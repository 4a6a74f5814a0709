"""File-backed blob store: one file per key inside a directory."""

import os
import re
import tempfile
from typing import Optional

from .base import BlobStore
from ..errors import PersistenceError

_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")


class FileBlobStore(BlobStore):
    """Local key-value store kept as ``<directory>/<key>.json`` files."""

    def __init__(self, directory: str):
        """Initialize file store.

        Args:
            directory: Directory holding the blobs (created on first write)
        """
        self.directory = directory

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, _SAFE_KEY.sub("_", key) + ".json")

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            os.makedirs(self.directory, exist_ok=True)
            # Write to a temp file first so a crash never leaves half a blob
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_path, path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to write {path}: {e}") from e

    def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            os.remove(path)
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise PersistenceError(f"Failed to delete {path}: {e}") from e

    def ping(self) -> bool:
        if os.path.isdir(self.directory):
            return os.access(self.directory, os.W_OK)
        parent = os.path.dirname(os.path.abspath(self.directory))
        return os.access(parent, os.W_OK)
