from fastapi import APIRouter, Depends, HTTPException, status, Query

from searchpulse.core.dependencies import get_movie_search_service, get_tmdb_movie_search_service
from searchpulse.core.exceptions import BaseAppException, MovieNotFoundException, TMDBUnavailableException
from searchpulse.schemas.movie import MovieSearchResponse, MovieListResponse
from searchpulse.services.movie_service import MovieSearchService

router = APIRouter(prefix="/movies", tags=["movies"])

def handle_exception(e: Exception) -> HTTPException:
    if isinstance(e, HTTPException):
        return e
    if isinstance(e, BaseAppException):
        return HTTPException(
            status_code=e.status_code,
            detail=e.message
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An internal server error occurred"
    )

@router.get("/search", response_model=MovieSearchResponse)
def search_movies(
    query: str = Query(..., min_length=1, description="Search query"),
    page: int = Query(1, ge=1, description="Page number"),
    movie_service: MovieSearchService = Depends(get_movie_search_service)
):
    try:
        result = movie_service.search_movies(query.strip(), page)
        if not result["success"]:
            raise TMDBUnavailableException(result["error"])
        return result
    except Exception as e:
        raise handle_exception(e)

@router.get("/popular", response_model=MovieListResponse)
def get_popular_movies(
    page: int = Query(1, ge=1, description="Page number"),
    movie_service: MovieSearchService = Depends(get_tmdb_movie_search_service)
):
    try:
        result = movie_service.discover_popular(page)
        if not result["success"]:
            raise TMDBUnavailableException(result["error"])
        return result
    except Exception as e:
        raise handle_exception(e)

@router.get("/{tmdb_id}")
def get_movie_details(
    tmdb_id: int,
    movie_service: MovieSearchService = Depends(get_tmdb_movie_search_service)
):
    try:
        result = movie_service.get_movie_details(tmdb_id)
        if result["success"]:
            return result
        if result.get("status_code") == status.HTTP_404_NOT_FOUND:
            raise MovieNotFoundException()
        raise TMDBUnavailableException(result["error"])
    except Exception as e:
        raise handle_exception(e)
