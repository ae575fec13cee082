"""
Factory for creating redirect cache instances.
"""

import logging
from enum import Enum

from shortlink_app.config import Settings, settings as default_settings
from .strategies import CacheStrategy, RedisCache, InMemoryCache, NullCache

logger = logging.getLogger(__name__)


class CacheBackend(Enum):
    """Available cache backends"""
    MEMORY = "memory"
    REDIS = "redis"
    NULL = "null"


class CacheFactory:
    """
    Simple factory for creating cache instances.

    Returns a fresh instance per call; the application owns its lifecycle
    (start/stop of the eviction sweep) and passes it to the services.
    """

    @classmethod
    def create(cls, backend: CacheBackend, settings: Settings = None) -> CacheStrategy:
        """
        Create a cache instance.

        Args:
            backend: Type of cache backend (from enum)
            settings: Settings to read TTL and connection details from

        Returns:
            CacheStrategy instance
        """
        settings = settings or default_settings

        if backend == CacheBackend.REDIS:
            import redis

            try:
                redis_client = redis.from_url(
                    settings.redis_url,
                    decode_responses=False,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )
                # Test connection immediately
                redis_client.ping()
                logger.info("Redis cache initialized")
                return RedisCache(redis_client, ttl=settings.cache_ttl)

            except redis.RedisError as e:
                logger.warning("Redis connection failed: %s; falling back to in-memory cache", e)
                backend = CacheBackend.MEMORY

        if backend == CacheBackend.MEMORY:
            logger.info("In-memory cache initialized")
            return InMemoryCache(
                ttl=settings.cache_ttl,
                check_period=settings.cache_check_period,
                lock_stripes=settings.cache_lock_stripes,
            )

        if backend == CacheBackend.NULL:
            logger.info("Null cache initialized")
            return NullCache()

        raise ValueError(f"Unknown cache backend: {backend}")
