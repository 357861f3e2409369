from pydantic import BaseModel
from typing import Optional, List

from searchpulse.schemas.metric import RecordResult

# TMDB Response Schemas
class TMDBMovie(BaseModel):
    """TMDB Movie data structure"""
    id: int
    title: str
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    release_date: Optional[str] = None
    original_language: Optional[str] = None
    vote_average: Optional[float] = None
    vote_count: Optional[int] = None
    genre_ids: Optional[List[int]] = None
    popularity: Optional[float] = None

class MoviePage(BaseModel):
    """A page of TMDB movie results"""
    page: int = 1
    results: List[TMDBMovie] = []
    total_pages: int = 0
    total_results: int = 0

class MovieSearchResponse(BaseModel):
    """Search results plus the outcome of recording the search"""
    query: str
    data: MoviePage
    metric: Optional[RecordResult] = None

class MovieListResponse(BaseModel):
    page: int
    data: MoviePage
