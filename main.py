import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shortlink_app.api.v1 import urls, redirect
from shortlink_app.config import settings
from shortlink_app.dependencies import build_components
from shortlink_app.errors import ShortLinkError
from shortlink_app.logging_config import setup_logging
from shortlink_app.schemas.short_link import ErrorResponse

setup_logging(level=settings.log_level, log_file=settings.log_file, json_format=settings.log_json)
logger = logging.getLogger("shortlink_app.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build shared components, run the cache sweeper, drain visits on exit."""
    components = build_components(settings)
    app.state.components = components
    await components.cache.start()
    logger.info("%s started (environment=%s, restricted=%s)",
                settings.app_name, settings.environment, settings.restricted_mode)
    try:
        yield
    finally:
        await components.dispatcher.flush()
        await components.cache.stop()
        logger.info("%s stopped", settings.app_name)


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="A URL shortener service built with FastAPI",
    debug=settings.debug,
    lifespan=lifespan,
)


@app.exception_handler(ShortLinkError)
async def handle_short_link_error(request: Request, exc: ShortLinkError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(error="Invalid request body").model_dump(),
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error("%s %s crashed", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="Internal Server Error").model_dump(),
    )


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
def health_check(request: Request):
    """Health check endpoint"""
    cache = request.app.state.components.cache
    return {
        "status": "healthy",
        "environment": settings.environment,
        "cache": cache.stats().model_dump(),
    }


######## Include routers
app.include_router(urls.router)
# Catch-all /{short_id} goes last
app.include_router(redirect.router)
