import logging

from shortlink_app.errors import NotFound
from shortlink_app.schemas.short_link import AnalyticsReport, VisitEvent
from shortlink_app.store.strategies import RecordStore

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Appends visit events and reads them back."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def record_visit(self, short_id: str) -> None:
        """
        Append a visit stamped with the current time.

        Called fire-and-forget from the cache-hit redirect path, so a store
        failure here surfaces only in the dispatcher's log.
        """
        record = await self.store.find_and_append_visit(short_id, VisitEvent.now())
        if record is None:
            logger.warning("Visit for unknown short ID %s dropped", short_id)

    async def get_analytics(self, short_id: str) -> AnalyticsReport:
        record = await self.store.find_by_id(short_id, include_history=True)
        if record is None:
            raise NotFound(f"Short URL not found: {short_id}")
        return AnalyticsReport(
            created_at=record.created_at,
            events=record.visit_history,
        )
