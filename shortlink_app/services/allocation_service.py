import logging
from typing import NamedTuple, Optional

from shortlink_app.cache.strategies import CacheStrategy
from shortlink_app.errors import AllocationExhausted, DuplicateKey, InvalidURL
from shortlink_app.services.short_id_generator import ShortIDGenerator
from shortlink_app.services.url_validator import URLValidator
from shortlink_app.store.strategies import RecordStore

logger = logging.getLogger(__name__)


class AllocationResult(NamedTuple):
    short_id: str
    created: bool


class AllocationService:
    """
    Maps long URLs to short IDs.

    Flow:
    1. Validate the long URL
    2. Reuse the existing record for an identical URL (exact string match)
    3. Otherwise draw random candidates until one is free, at most
       ``max_attempts`` times
    4. Create the record, then warm the cache

    Allocations are not serialized against each other. The store's unique
    constraint on the redirect URL settles races between two requests for
    the same new URL: the loser re-reads and returns the winner's ID. A
    short ID taken between the free-check and the create counts as one more
    collision.
    """

    def __init__(
        self,
        store: RecordStore,
        cache: CacheStrategy,
        generator: ShortIDGenerator,
        validator: URLValidator,
        id_length: int = 8,
        max_attempts: int = 5,
    ):
        self.store = store
        self.cache = cache
        self.generator = generator
        self.validator = validator
        self.id_length = id_length
        self.max_attempts = max_attempts

    async def allocate(self, long_url: str) -> AllocationResult:
        """
        Return the short ID for ``long_url``, creating one if needed.

        Raises:
            InvalidURL: the validator rejected ``long_url``
            AllocationExhausted: every candidate ID collided
            StoreFailure: the record store failed
        """
        if not self.validator.validate(long_url):
            raise InvalidURL(
                "Invalid URL format. Please provide a valid HTTP/HTTPS URL. "
                f"Received: {long_url}"
            )

        existing = await self._find_existing(long_url)
        if existing is not None:
            return existing

        for attempt in range(1, self.max_attempts + 1):
            candidate = self.generator.generate(self.id_length)

            if await self.store.find_by_id(candidate) is not None:
                logger.info("Short ID collision on %s (attempt %d/%d)",
                            candidate, attempt, self.max_attempts)
                continue

            try:
                record = await self.store.create(candidate, long_url)
            except DuplicateKey as e:
                if e.field == "redirect_url":
                    # A concurrent request created this URL first
                    existing = await self._find_existing(long_url)
                    if existing is not None:
                        return existing
                    raise
                logger.info("Short ID %s taken during create (attempt %d/%d)",
                            candidate, attempt, self.max_attempts)
                continue

            await self.cache.set(record.short_id, record.redirect_url)
            logger.info("Allocated %s -> %s", record.short_id, record.redirect_url)
            return AllocationResult(record.short_id, True)

        logger.error("Short ID allocation exhausted after %d attempts for %s",
                     self.max_attempts, long_url)
        raise AllocationExhausted(
            "Failed to generate unique short ID. Please try again."
        )

    async def _find_existing(self, long_url: str) -> Optional[AllocationResult]:
        record = await self.store.find_by_url(long_url)
        if record is None:
            return None
        await self.cache.set(record.short_id, record.redirect_url)
        return AllocationResult(record.short_id, False)
