"""
Pydantic schemas: domain records shared by the store, cache and services,
plus the request/response shapes of the HTTP API.
"""

from .short_link import (
    VisitEvent,
    ShortLinkRecord,
    AnalyticsReport,
    CacheStats,
    ShortenRequest,
    ShortenResponse,
    AnalyticsResponse,
    CacheStatsResponse,
    ErrorResponse,
)

__all__ = [
    "VisitEvent",
    "ShortLinkRecord",
    "AnalyticsReport",
    "CacheStats",
    "ShortenRequest",
    "ShortenResponse",
    "AnalyticsResponse",
    "CacheStatsResponse",
    "ErrorResponse",
]
