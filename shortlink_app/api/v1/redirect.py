from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from shortlink_app.dependencies import get_redirect_service
from shortlink_app.services.redirect_service import RedirectService

router = APIRouter(tags=["redirect"])


@router.get("/{short_id}")
async def redirect_to_long_url(
    short_id: str,
    redirect_service: RedirectService = Depends(get_redirect_service),
):
    """
    Redirect to the original URL.

    Flow:
    1. Cache hit: visit is recorded in the background, redirect immediately
    2. Cache miss: one store call returns the URL and records the visit

    InvalidShortID (400) and NotFound (404) are turned into responses by
    the application's error handler.
    """
    long_url = await redirect_service.resolve(short_id)
    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)
