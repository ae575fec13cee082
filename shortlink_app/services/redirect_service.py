import logging
import re

from shortlink_app.cache.strategies import CacheStrategy
from shortlink_app.errors import InvalidShortID, NotFound
from shortlink_app.hit_processor.dispatcher import VisitDispatcher
from shortlink_app.schemas.short_link import VisitEvent
from shortlink_app.services.analytics_service import AnalyticsService
from shortlink_app.store.strategies import RecordStore

logger = logging.getLogger(__name__)

_SHORT_ID_CHARS = re.compile(r"[A-Za-z0-9_-]+")


class RedirectService:
    """
    Resolves short IDs for redirection using a read-through cache.

    Flow:
    1. Reject malformed IDs before touching cache or store
    2. Cache hit: dispatch the visit append in the background, return at once
    3. Cache miss: one store call fetches the record and appends the visit,
       then the cache is populated

    The miss path already pays a store round trip, so the append rides on
    it. The hit path must not add one.
    """

    def __init__(
        self,
        cache: CacheStrategy,
        store: RecordStore,
        analytics: AnalyticsService,
        dispatcher: VisitDispatcher,
        min_length: int = 6,
        max_length: int = 10,
    ):
        self.cache = cache
        self.store = store
        self.analytics = analytics
        self.dispatcher = dispatcher
        self.min_length = min_length
        self.max_length = max_length

    def check_short_id(self, short_id: str) -> None:
        if not short_id or not (self.min_length <= len(short_id) <= self.max_length):
            raise InvalidShortID(
                f"Short ID must be {self.min_length}-{self.max_length} characters"
            )
        if not _SHORT_ID_CHARS.fullmatch(short_id):
            raise InvalidShortID("Short ID contains invalid characters")

    async def resolve(self, short_id: str) -> str:
        """
        Return the redirect URL for ``short_id`` and count the visit.

        Raises:
            InvalidShortID: malformed ``short_id``
            NotFound: no such record
            StoreFailure: the store failed on a cache miss
        """
        self.check_short_id(short_id)

        cached_url = await self.cache.get(short_id)
        if cached_url is not None:
            await self.dispatcher.submit(self.analytics.record_visit, short_id)
            return cached_url

        record = await self.store.find_and_append_visit(short_id, VisitEvent.now())
        if record is None:
            raise NotFound(f"Short URL not found: {short_id}")

        await self.cache.set(short_id, record.redirect_url)
        return record.redirect_url
