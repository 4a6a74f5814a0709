"""Abstract base class for key-value blob stores."""

from abc import ABC, abstractmethod
from typing import Optional


class BlobStore(ABC):
    """A key-value store holding one serialized blob per key.

    Implementations raise ``PersistenceError`` when the underlying storage
    cannot be read or written.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Read the blob stored under a key.

        Args:
            key: Logical key

        Returns:
            The stored blob, or None if nothing is stored under the key
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a blob under a key, replacing any previous value.

        Args:
            key: Logical key
            value: Serialized blob
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove a key.

        Args:
            key: Logical key

        Returns:
            True if a value was removed
        """
        pass

    def ping(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy
        """
        return True

    def close(self) -> None:
        """Release store resources."""
        pass
