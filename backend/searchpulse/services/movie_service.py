import logging
from typing import Any, Dict, Optional

from searchpulse.core.interfaces import MovieServiceInterface, TMDBError
from searchpulse.services.search_metrics_service import SearchCountRecorder

logger = logging.getLogger(__name__)

class MovieSearchService:
    """Movie search over TMDB, recording the popularity of each search"""

    def __init__(self, tmdb_movie_service: MovieServiceInterface,
                 recorder: Optional[SearchCountRecorder] = None):
        self.tmdb_movie_service = tmdb_movie_service
        self.recorder = recorder

    def search_movies(self, query: str, page: int = 1, record: bool = True) -> Dict[str, Any]:
        """Search movies on TMDB and count the search against its first result"""
        try:
            response = self.tmdb_movie_service.search_movies(query, page)
        except TMDBError as e:
            logger.error(f"Error searching movies: {e.message}")
            return {"success": False, "error": e.message}

        if not response.success:
            return {"success": False, "error": "Failed to search movies"}

        result = {
            "success": True,
            "data": response.data,
            "query": query,
            "page": page,
            "metric": None,
        }

        results = response.data.get("results") or []
        if record and results and self.recorder is not None:
            # Outcome is informational only; the search result is returned either way
            metric = self.recorder.update_search_count(query, results[0])
            result["metric"] = metric.model_dump(mode="json")
        return result

    def discover_popular(self, page: int = 1) -> Dict[str, Any]:
        """Get popular movies from TMDB"""
        try:
            response = self.tmdb_movie_service.discover_popular(page)
        except TMDBError as e:
            logger.error(f"Error fetching popular movies: {e.message}")
            return {"success": False, "error": e.message}

        if response.success:
            return {"success": True, "data": response.data, "page": page}
        return {"success": False, "error": "Failed to fetch popular movies"}

    def get_movie_details(self, tmdb_id: int) -> Dict[str, Any]:
        """Get movie details from TMDB"""
        try:
            response = self.tmdb_movie_service.get_movie_details(tmdb_id)
        except TMDBError as e:
            logger.error(f"Error fetching movie details: {e.message}")
            return {"success": False, "error": e.message}

        if response.success:
            return {"success": True, "data": response.data}
        return {"success": False, "error": "Failed to fetch movie details", "status_code": response.status_code}
