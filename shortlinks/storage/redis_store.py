"""Redis-backed blob store."""

import logging
from typing import Optional

import redis

from .base import BlobStore
from ..errors import PersistenceError


class RedisBlobStore(BlobStore):
    """Keeps each blob as a plain Redis string value."""

    def __init__(
        self,
        redis_url: str,
        key_prefix: str = "shortlinks:",
        client: Optional[redis.Redis] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis store.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            key_prefix: Prefix applied to every logical key
            client: Optional pre-built client (used instead of redis_url)
            logger: Optional logger instance
        """
        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self.logger = logger or logging.getLogger(__name__)
        self.client = client or redis.Redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
        self.logger.info(f"Redis blob store using prefix '{key_prefix}'")

    def get_store_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        try:
            value = self.client.get(self.get_store_key(key))
        except redis.RedisError as e:
            raise PersistenceError(f"Redis get error: {e}") from e
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            self.client.set(self.get_store_key(key), value)
        except redis.RedisError as e:
            raise PersistenceError(f"Redis set error: {e}") from e

    def delete(self, key: str) -> bool:
        try:
            return self.client.delete(self.get_store_key(key)) > 0
        except redis.RedisError as e:
            raise PersistenceError(f"Redis delete error: {e}") from e

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            self.logger.error(f"Redis ping failed: {e}")
            return False

    def close(self) -> None:
        self.client.close()
        self.logger.info("Redis connection closed")
