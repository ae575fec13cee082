from fastapi import APIRouter, Depends

from shortlink_app.cache.strategies import CacheStrategy
from shortlink_app.dependencies import (
    get_allocation_service,
    get_analytics_service,
    get_cache,
)
from shortlink_app.errors import InvalidURL
from shortlink_app.schemas.short_link import (
    AnalyticsResponse,
    CacheStatsResponse,
    ShortenRequest,
    ShortenResponse,
)
from shortlink_app.services.allocation_service import AllocationService
from shortlink_app.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/url", tags=["urls"])


@router.post("", response_model=ShortenResponse, response_model_exclude_none=True)
async def create_short_url(
    body: ShortenRequest,
    allocation_service: AllocationService = Depends(get_allocation_service),
):
    """Shorten a URL; submitting the same URL again returns the same ID."""
    if not body.url:
        raise InvalidURL("URL is required")

    result = await allocation_service.allocate(body.url)
    return ShortenResponse(
        id=result.short_id,
        message=None if result.created else "URL already exists",
    )


@router.get("/analytics/{short_id}", response_model=AnalyticsResponse)
async def get_analytics(
    short_id: str,
    analytics_service: AnalyticsService = Depends(get_analytics_service),
):
    """Visit history for a short URL"""
    report = await analytics_service.get_analytics(short_id)
    return AnalyticsResponse.from_report(report)


@router.get("/cache/stats", response_model=CacheStatsResponse)
async def get_cache_stats(cache: CacheStrategy = Depends(get_cache)):
    stats = cache.stats()
    return CacheStatsResponse(keys=stats.keys, hits=stats.hits, misses=stats.misses)
