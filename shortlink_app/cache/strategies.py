"""
Cache strategies using Strategy Pattern.
Allows switching between different redirect cache backends (In-Memory, Redis, Null).

The cache maps short ID -> redirect URL. It is never the system of record:
every miss can be answered by the record store.
"""

import asyncio
import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, NamedTuple, Optional

from shortlink_app.schemas.short_link import CacheStats

logger = logging.getLogger(__name__)


class CacheStrategy(ABC):
    """
    Abstract base class for cache strategies.

    This is the Strategy Pattern interface - allows multiple cache implementations
    without changing the service layer code.

    All data methods are async because cache operations may involve I/O
    (network for Redis).
    """

    def __init__(self):
        self._hits = 0
        self._misses = 0
        self._stats_lock = threading.Lock()

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Get value from cache.

        The returned value is shared with the cache, not copied.

        Args:
            key: Cache key (the short ID)

        Returns:
            Cached value or None if absent or expired
        """

    @abstractmethod
    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        """
        Set value in cache. Restarts the entry's TTL.

        Args:
            key: Cache key (the short ID)
            value: Redirect URL
            ttl: Time to live in seconds (default: the cache's configured TTL)

        Returns:
            True if successful, False otherwise
        """

    @abstractmethod
    def key_count(self) -> int:
        """Current number of live keys."""

    def evict_expired(self) -> int:
        """Remove expired entries. Returns the number removed."""
        return 0

    async def start(self) -> None:
        """Start background maintenance, if the backend needs any."""

    async def stop(self) -> None:
        """Stop background maintenance."""

    def stats(self) -> CacheStats:
        """Key count plus cumulative hit/miss counters."""
        with self._stats_lock:
            hits, misses = self._hits, self._misses
        return CacheStats(keys=self.key_count(), hits=hits, misses=misses)

    def _record_lookup(self, hit: bool) -> None:
        with self._stats_lock:
            if hit:
                self._hits += 1
            else:
                self._misses += 1


class _Entry(NamedTuple):
    value: str
    expires_at: float


class InMemoryCache(CacheStrategy):
    """
    In-memory TTL cache with a background eviction sweep.

    Locking is striped: each key hashes to one of ``lock_stripes`` locks, so
    operations on unrelated short IDs don't serialize behind each other.
    The sweeper takes one stripe at a time and only for the removal of a
    single expired entry.

    Entries expire ``ttl`` seconds after their last ``set``. Expired entries
    are dropped on read as well as by the sweep, so the sweep period only
    bounds memory held by entries nobody reads again.
    """

    def __init__(
        self,
        ttl: int = 3600,
        check_period: float = 120,
        lock_stripes: int = 16,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__()
        if lock_stripes < 1:
            raise ValueError("lock_stripes must be >= 1")
        self.ttl = ttl
        self.check_period = check_period
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}
        self._locks: List[threading.Lock] = [threading.Lock() for _ in range(lock_stripes)]
        self._sweeper: Optional[asyncio.Task] = None

    def _lock_for(self, key: str) -> threading.Lock:
        return self._locks[hash(key) % len(self._locks)]

    async def get(self, key: str) -> Optional[str]:
        now = self._clock()
        with self._lock_for(key):
            entry = self._entries.get(key)
            if entry is not None and entry.expires_at <= now:
                del self._entries[key]
                entry = None

        self._record_lookup(entry is not None)
        return entry.value if entry is not None else None

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        expires_at = self._clock() + (ttl if ttl is not None else self.ttl)
        with self._lock_for(key):
            self._entries[key] = _Entry(value, expires_at)
        return True

    def key_count(self) -> int:
        return len(self._entries)

    def evict_expired(self) -> int:
        now = self._clock()
        removed = 0
        # Snapshot the keys; foreground writers keep running meanwhile
        for key in list(self._entries.keys()):
            with self._lock_for(key):
                entry = self._entries.get(key)
                if entry is not None and entry.expires_at <= now:
                    del self._entries[key]
                    removed += 1
        if removed:
            logger.debug("Evicted %d expired cache entries", removed)
        return removed

    async def start(self) -> None:
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.create_task(self._sweep_forever())
            logger.info(
                "Cache sweeper started (ttl=%ss, period=%ss)", self.ttl, self.check_period
            )

    async def stop(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None
        logger.info("Cache sweeper stopped")

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.check_period)
            try:
                self.evict_expired()
            except Exception:
                logger.exception("Cache sweep failed")


class RedisCache(CacheStrategy):
    """
    Redis cache implementation.

    Shared between server processes. Expiry is delegated to Redis (SETEX),
    so there is no sweeper. Hit/miss counters are per process.

    Redis errors are logged and reported as a miss: the record store can
    always answer instead.
    """

    def __init__(self, redis_client, ttl: int = 3600, key_prefix: str = "url:"):
        """
        Initialize Redis cache.

        Args:
            redis_client: Redis client instance (redis.Redis)
            ttl: Default time to live in seconds
            key_prefix: Namespace for cache keys
        """
        super().__init__()
        self.redis = redis_client
        self.ttl = ttl
        self.key_prefix = key_prefix

    async def get(self, key: str) -> Optional[str]:
        try:
            value = self.redis.get(self.key_prefix + key)
        except Exception as e:
            logger.warning("Redis get error: %s", e)
            value = None
        self._record_lookup(value is not None)
        if value is None:
            return None
        return value.decode("utf-8") if isinstance(value, bytes) else value

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        try:
            return bool(self.redis.setex(self.key_prefix + key, ttl or self.ttl, value))
        except Exception as e:
            logger.warning("Redis set error: %s", e)
            return False

    def key_count(self) -> int:
        try:
            return sum(1 for _ in self.redis.scan_iter(match=self.key_prefix + "*"))
        except Exception as e:
            logger.warning("Redis scan error: %s", e)
            return 0


class NullCache(CacheStrategy):
    """
    Null Object Pattern - cache that does nothing.

    Every lookup is a miss, so every redirect goes to the store.
    """

    async def get(self, key: str) -> Optional[str]:
        self._record_lookup(False)
        return None

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        return True

    def key_count(self) -> int:
        return 0
