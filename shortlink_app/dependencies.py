"""
FastAPI dependencies for dependency injection.

The application builds one set of components at startup (see
``build_components``) and keeps them on ``app.state``. Dependencies hand
them to routes and services, so there is no process-wide singleton and
tests can swap any piece with ``app.dependency_overrides``.
"""

from dataclasses import dataclass

from fastapi import Depends, Request

from shortlink_app.cache.factory import CacheFactory, CacheBackend
from shortlink_app.cache.strategies import CacheStrategy
from shortlink_app.config import Settings, settings
from shortlink_app.hit_processor.dispatcher import DispatchMode, VisitDispatcher
from shortlink_app.services.allocation_service import AllocationService
from shortlink_app.services.analytics_service import AnalyticsService
from shortlink_app.services.redirect_service import RedirectService
from shortlink_app.services.short_id_generator import RandomShortIDGenerator, ShortIDGenerator
from shortlink_app.services.url_validator import URLValidator
from shortlink_app.store.factory import StoreFactory, StoreBackend
from shortlink_app.store.strategies import RecordStore


@dataclass
class Components:
    """Long-lived infrastructure shared by every request."""
    cache: CacheStrategy
    store: RecordStore
    dispatcher: VisitDispatcher
    generator: ShortIDGenerator
    validator: URLValidator


def build_components(config: Settings) -> Components:
    return Components(
        cache=CacheFactory.create(CacheBackend(config.cache_backend), config),
        store=StoreFactory.create(StoreBackend(config.store_backend), config),
        dispatcher=VisitDispatcher(DispatchMode(config.visit_dispatch_mode)),
        generator=RandomShortIDGenerator(),
        validator=URLValidator(restricted=config.restricted_mode),
    )


def get_components(request: Request) -> Components:
    return request.app.state.components


def get_settings() -> Settings:
    return settings


def get_cache(components: Components = Depends(get_components)) -> CacheStrategy:
    return components.cache


def get_record_store(components: Components = Depends(get_components)) -> RecordStore:
    return components.store


def get_dispatcher(components: Components = Depends(get_components)) -> VisitDispatcher:
    return components.dispatcher


def get_analytics_service(
    store: RecordStore = Depends(get_record_store),
) -> AnalyticsService:
    return AnalyticsService(store)


def get_allocation_service(
    components: Components = Depends(get_components),
    store: RecordStore = Depends(get_record_store),
    cache: CacheStrategy = Depends(get_cache),
    config: Settings = Depends(get_settings),
) -> AllocationService:
    return AllocationService(
        store=store,
        cache=cache,
        generator=components.generator,
        validator=components.validator,
        id_length=config.short_id_length,
        max_attempts=config.max_allocation_attempts,
    )


def get_redirect_service(
    store: RecordStore = Depends(get_record_store),
    cache: CacheStrategy = Depends(get_cache),
    dispatcher: VisitDispatcher = Depends(get_dispatcher),
    analytics: AnalyticsService = Depends(get_analytics_service),
    config: Settings = Depends(get_settings),
) -> RedirectService:
    return RedirectService(
        cache=cache,
        store=store,
        analytics=analytics,
        dispatcher=dispatcher,
        min_length=config.short_id_min_length,
        max_length=config.short_id_max_length,
    )
