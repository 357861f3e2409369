from typing import Optional
from ..interfaces import MovieServiceInterface, TMDBResponse, TMDBClientInterface
from ..cache import CacheService, tmdb_key

CACHE_TTL_24H = 24 * 60 * 60

class MovieService(MovieServiceInterface):
    """Service class for TMDB movie endpoints"""

    def __init__(self, client: TMDBClientInterface, cache: Optional[CacheService] = None):
        self.client = client
        self.cache = cache

    def _cached(self, cache_key: str, endpoint: str, params: dict = None) -> TMDBResponse:
        if self.cache is not None:
            cached = self.cache.get_json(cache_key)
            if cached is not None:
                return TMDBResponse(cached, 200, True)
        resp = self.client.make_request(endpoint, params)
        if resp.success and self.cache is not None:
            self.cache.set_json(cache_key, resp.data, CACHE_TTL_24H)
        return resp

    def search_movies(self, query: str, page: int = 1) -> TMDBResponse:
        """Search movies by query (never cached)"""
        params = {"query": query, "page": page, "include_adult": "false"}
        return self.client.make_request("search/movie", params)

    def discover_popular(self, page: int = 1) -> TMDBResponse:
        """Movies sorted by popularity, the listing shown before any search"""
        params = {"sort_by": "popularity.desc", "page": page}
        return self._cached(tmdb_key("movie", "popular", f"p{page}"), "discover/movie", params)

    def get_movie_details(self, movie_id: int) -> TMDBResponse:
        """Get movie details by ID"""
        return self._cached(tmdb_key("movie", movie_id, "details"), f"movie/{movie_id}")
