"""Cache selection — builds the configured cache backend.

The set of backends is closed: ``void`` (null object, the default) and
``memory``.
"""

from __future__ import annotations

import logging

from kima.cache.base import Cache
from kima.cache.memory import MemoryCache
from kima.cache.void import VoidCache
from kima.config.settings import CacheSettings

logger = logging.getLogger(__name__)


def create_cache(settings: CacheSettings | None = None) -> Cache:
    """Create the cache backend named in the settings.

    Args:
        settings: Cache configuration. Uses defaults (void cache) if None.

    Returns:
        A ready-to-use cache.
    """
    settings = settings or CacheSettings()

    if settings.backend == "memory":
        logger.info("Using in-memory cache backend")
        return MemoryCache(default_expiration=settings.default_expiration)

    logger.info("Using void cache backend")
    return VoidCache()
