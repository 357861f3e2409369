from typing import List
from fastapi import APIRouter, Depends, HTTPException, status, Query

from searchpulse.core.cache import TRENDING_MAX_LIMIT
from searchpulse.core.dependencies import get_recorder
from searchpulse.core.exceptions import BaseAppException
from searchpulse.schemas.metric import RecordResult, SearchCountCreate, TrendingSearchResponse
from searchpulse.services.search_metrics_service import SearchCountRecorder

router = APIRouter(prefix="/metrics", tags=["metrics"])

def handle_exception(e: Exception) -> HTTPException:
    if isinstance(e, BaseAppException):
        return HTTPException(
            status_code=e.status_code,
            detail=e.message
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An internal server error occurred"
    )

@router.get("/trending", response_model=List[TrendingSearchResponse])
def get_trending_searches(
    limit: int = Query(5, ge=1, le=TRENDING_MAX_LIMIT, description="Number of search terms"),
    recorder: SearchCountRecorder = Depends(get_recorder)
):
    try:
        return [
            TrendingSearchResponse(
                search_term=m.search_term,
                count=m.count,
                movie_id=m.movie_id,
                poster_url=m.poster_url,
            )
            for m in recorder.get_trending(limit)
        ]
    except Exception as e:
        raise handle_exception(e)

@router.post("/search-count", response_model=RecordResult)
def record_search_count(
    payload: SearchCountCreate,
    recorder: SearchCountRecorder = Depends(get_recorder)
):
    # Failures are reported in the body, not as an HTTP error
    return recorder.update_search_count(payload.search_term, payload.movie)
