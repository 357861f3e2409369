from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from dataclasses import dataclass

from searchpulse.schemas.metric import SearchMetric

@dataclass
class TMDBConfig:
    """Configuration class for TMDB API"""
    api_key: str
    base_url: str = "https://api.themoviedb.org/3"
    language: str = "en-US"
    timeout: int = 30

class TMDBResponse:
    """Response wrapper for TMDB API calls"""
    def __init__(self, data: Dict, status_code: int, success: bool):
        self.data = data
        self.status_code = status_code
        self.success = success

class TMDBError(Exception):
    """Custom exception for TMDB API errors"""
    def __init__(self, message: str, status_code: int = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

class TMDBClientInterface(ABC):
    """Abstract interface for TMDB client"""

    @abstractmethod
    def make_request(self, endpoint: str, params: Dict = None) -> TMDBResponse:
        pass

class MovieServiceInterface(ABC):
    """Abstract interface for movie service"""

    @abstractmethod
    def search_movies(self, query: str, page: int = 1) -> TMDBResponse:
        pass

    @abstractmethod
    def discover_popular(self, page: int = 1) -> TMDBResponse:
        pass

    @abstractmethod
    def get_movie_details(self, movie_id: int) -> TMDBResponse:
        pass

class MetricsStoreInterface(ABC):
    """Abstract interface for the search metrics table.

    Implementations raise MetricsStoreError on any storage failure. A missing
    row is not a failure: find_by_term returns None.
    """

    @abstractmethod
    def find_by_term(self, search_term: str) -> Optional[SearchMetric]:
        pass

    @abstractmethod
    def increment(self, metric: SearchMetric) -> SearchMetric:
        pass

    @abstractmethod
    def insert(self, search_term: str, movie_id: int, poster_url: str) -> SearchMetric:
        pass

    @abstractmethod
    def upsert_increment(self, search_term: str, movie_id: int, poster_url: str) -> SearchMetric:
        """Insert with count 1 or increment the existing row in one storage call"""
        pass

    @abstractmethod
    def top_by_count(self, limit: int = 5) -> List[SearchMetric]:
        pass
