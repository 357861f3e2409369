from typing import Optional
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from searchpulse.core.config import Settings, get_settings
from searchpulse.core.enums import MetricsBackend
from searchpulse.core.exceptions import MetricsStoreNotConfiguredException
from searchpulse.core.interfaces import MetricsStoreInterface, MovieServiceInterface
from searchpulse.db import get_db
from searchpulse.repositories import SearchMetricRepository, SupabaseMetricsRepository
from searchpulse.services.movie_service import MovieSearchService
from searchpulse.services.search_metrics_service import SearchCountRecorder

def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()

def get_tmdb_movie_service(request: Request) -> MovieServiceInterface:
    return request.app.state.tmdb_movie_service

def get_optional_metrics_store(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    db: Session = Depends(get_db),
) -> Optional[MetricsStoreInterface]:
    """Metrics store for this request, or None when storage is not configured"""
    if settings.METRICS_BACKEND == MetricsBackend.SQL.value:
        return SearchMetricRepository(db)

    client = getattr(request.app.state, "supabase", None)
    return SupabaseMetricsRepository(client, settings.METRICS_TABLE) if client is not None else None

def get_metrics_store(
    store: Optional[MetricsStoreInterface] = Depends(get_optional_metrics_store),
) -> MetricsStoreInterface:
    if store is None:
        raise MetricsStoreNotConfiguredException()
    return store

def _build_recorder(request: Request, settings: Settings, store: MetricsStoreInterface) -> SearchCountRecorder:
    return SearchCountRecorder(
        store,
        image_base_url=settings.POSTER_BASE_URL,
        atomic=settings.METRICS_ATOMIC_UPSERT,
        cache=getattr(request.app.state, "cache", None),
        trending_ttl=settings.TRENDING_CACHE_TTL,
    )

def get_recorder(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    store: MetricsStoreInterface = Depends(get_metrics_store),
) -> SearchCountRecorder:
    return _build_recorder(request, settings, store)

def get_movie_search_service(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    tmdb_movie_service: MovieServiceInterface = Depends(get_tmdb_movie_service),
    store: Optional[MetricsStoreInterface] = Depends(get_optional_metrics_store),
) -> MovieSearchService:
    recorder = _build_recorder(request, settings, store) if store is not None else None
    return MovieSearchService(tmdb_movie_service, recorder)

def get_tmdb_movie_search_service(
    tmdb_movie_service: MovieServiceInterface = Depends(get_tmdb_movie_service),
) -> MovieSearchService:
    """Search service for TMDB-only routes; no metrics store is opened"""
    return MovieSearchService(tmdb_movie_service)
