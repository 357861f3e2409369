import logging
from typing import Any, List, Optional

from searchpulse.core.cache import CacheService, trending_key, TRENDING_MAX_LIMIT
from searchpulse.core.enums import RecordOutcome, FailureKind
from searchpulse.core.exceptions import MetricsStoreError
from searchpulse.core.interfaces import MetricsStoreInterface
from searchpulse.schemas.metric import RecordResult, SearchMetric

logger = logging.getLogger(__name__)

POSTER_BASE_URL = "https://image.tmdb.org/t/p/w500"

def _movie_field(movie: Any, name: str) -> Any:
    if isinstance(movie, dict):
        return movie.get(name)
    return getattr(movie, name, None)

def build_poster_url(poster_path: Optional[str], base_url: str = POSTER_BASE_URL) -> str:
    """Literal concatenation; a missing path is not validated."""
    return f"{base_url}{poster_path}"

class SearchCountRecorder:
    """Records how often each search term is searched.

    Default mode is read-then-write: look up the term, then update the row
    with the count that was read, or insert a new row. Two concurrent calls
    for the same term can both insert, or both write the same count.
    With ``atomic=True`` a single insert-or-increment call is made instead,
    which needs a unique index on ``searchTerm``.

    Storage failures never propagate out of ``update_search_count``; they are
    logged and reported through the returned RecordResult.
    """

    def __init__(self, store: MetricsStoreInterface, image_base_url: str = POSTER_BASE_URL,
                 atomic: bool = False, cache: Optional[CacheService] = None,
                 trending_ttl: int = 60):
        self.store = store
        self.image_base_url = image_base_url
        self.atomic = atomic
        self.cache = cache
        self.trending_ttl = trending_ttl

    def update_search_count(self, search_term: str, movie: Any) -> RecordResult:
        if not search_term or not search_term.strip():
            return RecordResult(
                outcome=RecordOutcome.FAILED,
                search_term=search_term or "",
                failure=FailureKind.INVALID,
                error="Search term is empty",
            )

        movie_id = _movie_field(movie, "id")
        poster_url = build_poster_url(_movie_field(movie, "poster_path"), self.image_base_url)

        if self.atomic:
            return self._upsert(search_term, movie_id, poster_url)

        try:
            existing = self.store.find_by_term(search_term)
        except MetricsStoreError as e:
            return self._failed(search_term, FailureKind.LOOKUP, e.message)
        except Exception as e:
            return self._failed(search_term, FailureKind.LOOKUP, str(e))

        try:
            if existing is not None:
                metric = self.store.increment(existing)
                outcome = RecordOutcome.INCREMENTED
            else:
                metric = self.store.insert(search_term, movie_id, poster_url)
                outcome = RecordOutcome.CREATED
        except MetricsStoreError as e:
            return self._failed(search_term, FailureKind.WRITE, e.message)
        except Exception as e:
            return self._failed(search_term, FailureKind.WRITE, str(e))

        self._invalidate_trending()
        logger.info(f"Search count {outcome.value} for '{search_term}' (count={metric.count})")
        return RecordResult(outcome=outcome, search_term=search_term, count=metric.count)

    def _upsert(self, search_term: str, movie_id: Any, poster_url: str) -> RecordResult:
        try:
            metric = self.store.upsert_increment(search_term, movie_id, poster_url)
        except MetricsStoreError as e:
            return self._failed(search_term, FailureKind.WRITE, e.message)
        except Exception as e:
            return self._failed(search_term, FailureKind.WRITE, str(e))

        self._invalidate_trending()
        outcome = RecordOutcome.CREATED if metric.count == 1 else RecordOutcome.INCREMENTED
        return RecordResult(outcome=outcome, search_term=search_term, count=metric.count)

    @staticmethod
    def _failed(search_term: str, kind: FailureKind, message: str) -> RecordResult:
        logger.error(f"Error updating search count: {kind.value} failed for '{search_term}': {message}")
        return RecordResult(
            outcome=RecordOutcome.FAILED,
            search_term=search_term,
            failure=kind,
            error=message,
        )

    def get_trending(self, limit: int = 5) -> List[SearchMetric]:
        """Most searched terms, highest count first. Raises MetricsStoreError."""
        cacheable = self.cache is not None and limit <= TRENDING_MAX_LIMIT
        if cacheable:
            cached = self.cache.get_json(trending_key(limit))
            if cached is not None:
                return [SearchMetric.model_validate(row) for row in cached]

        metrics = self.store.top_by_count(limit)
        if cacheable:
            self.cache.set_json(trending_key(limit), [m.model_dump(by_alias=True) for m in metrics], self.trending_ttl)
        return metrics

    def _invalidate_trending(self) -> None:
        if self.cache is not None:
            self.cache.delete(*[trending_key(n) for n in range(1, TRENDING_MAX_LIMIT + 1)])
