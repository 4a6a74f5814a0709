"""Wiring for the short link registry.

Builds one registry per process from a ``Config``; callers hold on to the
returned ``Application`` and pass its registry around.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .config import Config, load_config
from .service import ShortLinkRegistry
from .shortcode import ShortCodeGenerator
from .location import (
    HttpLocationResolver,
    LocationResolver,
    MockLocationResolver,
    StaticLocationResolver,
)
from .storage import BlobStore, FileBlobStore, MemoryBlobStore, RecordRepository, RedisBlobStore
from .common.event_log import EventLogHandler
from .common.logging_config import setup_logging


@dataclass
class Application:
    config: Config
    logger: logging.Logger
    store: BlobStore
    event_log: EventLogHandler
    registry: ShortLinkRegistry


def create_store(config: Config, logger: logging.Logger) -> BlobStore:
    """Create the blob store selected by ``storage_backend``."""
    if config.storage_backend == "redis":
        if not config.redis_url:
            raise ValueError("REDIS_URL is required for the redis storage backend")
        logger.info(f"Connecting to Redis at {config.redis_url}")
        return RedisBlobStore(
            redis_url=config.redis_url,
            key_prefix=config.redis_key_prefix,
            logger=logger,
        )
    if config.storage_backend == "file":
        logger.debug(f"Using file storage at {config.storage_path}")
        return FileBlobStore(config.storage_path)
    return MemoryBlobStore()


def create_location_resolver(config: Config, logger: logging.Logger) -> LocationResolver:
    """Create the resolver selected by ``location_backend``."""
    if config.location_backend == "http":
        return HttpLocationResolver(
            api_url=config.location_api_url,
            timeout_seconds=config.location_timeout_seconds,
            logger=logger,
        )
    if config.location_backend == "static":
        return StaticLocationResolver(config.location_label)
    return MockLocationResolver()


def create_application(config: Optional[Config] = None, store: Optional[BlobStore] = None) -> Application:
    """Build the registry and its collaborators.

    Args:
        config: Configuration (loaded from the environment if omitted)
        store: Optional blob store overriding ``storage_backend``

    Returns:
        The wired application
    """
    config = config or load_config()

    # Console logging first so store construction can log
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    store = store or create_store(config, logger)
    event_log = EventLogHandler(
        store,
        key=config.logs_key,
        max_entries=config.max_log_entries,
        persisted_entries=config.persisted_log_entries,
    )
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
        event_log=event_log,
    )

    registry = ShortLinkRegistry(
        repository=RecordRepository(store, key=config.records_key, logger=logger),
        short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
        location_resolver=create_location_resolver(config, logger),
        logger=logger,
        base_url=config.base_url,
        path_prefix=config.path_prefix,
        max_generation_attempts=config.max_generation_attempts,
        default_validity_minutes=config.default_validity_minutes,
        user_agent=config.user_agent,
    )

    return Application(
        config=config,
        logger=logger,
        store=store,
        event_log=event_log,
        registry=registry,
    )
