import logging
from typing import Optional
from .interfaces import TMDBConfig
from .tmdb_client import TMDBClient
from .cache import CacheService
from .services import MovieService

logger = logging.getLogger(__name__)

class TMDBServiceFactory:
    """Factory class for creating TMDB services"""

    @staticmethod
    def create_movie_service(api_key: str, language: str = "en-US", timeout: int = 30,
                             cache: Optional[CacheService] = None) -> MovieService:
        """Create a new movie service instance"""
        if not api_key:
            logger.warning("TMDB_API_KEY is not set; TMDB requests will be rejected")
        config = TMDBConfig(api_key=api_key, language=language, timeout=timeout)
        client = TMDBClient(config)
        return MovieService(client, cache=cache)

    @staticmethod
    def create_from_settings(settings, cache: Optional[CacheService] = None) -> MovieService:
        """Create the movie service described by application settings"""
        return TMDBServiceFactory.create_movie_service(
            api_key=settings.TMDB_API_KEY,
            language=settings.TMDB_LANGUAGE,
            timeout=settings.TMDB_TIMEOUT,
            cache=cache,
        )
