import time
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class VisitEvent(BaseModel):
    """A single resolved redirect. Identity is its position in the history."""

    timestamp: int = Field(..., description="Visit time in epoch milliseconds")

    @classmethod
    def now(cls) -> "VisitEvent":
        return cls(timestamp=int(time.time() * 1000))


class ShortLinkRecord(BaseModel):
    """Store-level record: one short ID bound to one redirect URL."""

    short_id: str
    redirect_url: str
    visit_history: List[VisitEvent] = Field(default_factory=list)
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AnalyticsReport(BaseModel):
    """Read-only analytics view. ``total_clicks`` is always ``len(events)``."""

    created_at: datetime
    events: List[VisitEvent]

    @property
    def total_clicks(self) -> int:
        return len(self.events)


class CacheStats(BaseModel):
    keys: int
    hits: int
    misses: int


# Wire schemas. Field names are camelCase on the wire.

class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenRequest(_WireModel):
    # Optional so a missing URL reaches the validator and becomes a 400
    url: Optional[str] = Field(None, description="The long URL to shorten")


class ShortenResponse(_WireModel):
    id: str
    success: bool = True
    message: Optional[str] = None


class AnalyticsResponse(_WireModel):
    total_clicks: int
    created_at: datetime
    analytics: List[VisitEvent]
    success: bool = True

    @classmethod
    def from_report(cls, report: AnalyticsReport) -> "AnalyticsResponse":
        return cls(
            total_clicks=report.total_clicks,
            created_at=report.created_at,
            analytics=report.events,
        )


class CacheStatsResponse(_WireModel):
    keys: int
    hits: int
    misses: int
    success: bool = True


class ErrorResponse(_WireModel):
    error: str
    success: bool = False
