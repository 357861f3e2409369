import logging
from typing import Any, List, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from searchpulse.core.exceptions import MetricsStoreError
from searchpulse.core.interfaces import MetricsStoreInterface
from searchpulse.schemas.metric import SearchMetric

logger = logging.getLogger(__name__)

# PostgREST: "JSON object requested, multiple (or no) rows returned"
NO_ROWS_CODE = "PGRST116"
INCREMENT_FUNCTION = "increment_search_count"

class SupabaseMetricsRepository(MetricsStoreInterface):
    """Metrics store backed by a Supabase (PostgREST) table"""

    def __init__(self, client: Client, table: str = "metrics"):
        self.client = client
        self.table_name = table

    def _table(self):
        return self.client.table(self.table_name)

    def find_by_term(self, search_term: str) -> Optional[SearchMetric]:
        try:
            response = (
                self._table()
                .select("*")
                .eq("searchTerm", search_term)
                .limit(1)
                .execute()
            )
        except APIError as e:
            if e.code == NO_ROWS_CODE:
                return None
            self._fail("looking up search term", e)
        except httpx.HTTPError as e:
            self._fail("looking up search term", e)
        row = _first(response.data)
        return SearchMetric.from_row(row) if row else None

    def increment(self, metric: SearchMetric) -> SearchMetric:
        """Write count + 1 for the row, based on the count that was read"""
        new_count = metric.count + 1
        try:
            response = (
                self._table()
                .update({"count": new_count})
                .eq("id", metric.id)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            self._fail("incrementing search count", e)
        row = _first(response.data)
        if row:
            return SearchMetric.from_row(row)
        return metric.model_copy(update={"count": new_count})

    def insert(self, search_term: str, movie_id: int, poster_url: str) -> SearchMetric:
        payload = {
            "searchTerm": search_term,
            "count": 1,
            "movie_id": movie_id,
            "poster_url": poster_url,
        }
        try:
            response = self._table().insert([payload]).execute()
        except (APIError, httpx.HTTPError) as e:
            self._fail("inserting search metric", e)
        row = _first(response.data)
        return SearchMetric.from_row(row or payload)

    def upsert_increment(self, search_term: str, movie_id: int, poster_url: str) -> SearchMetric:
        """Calls the increment_search_count SQL function (see create_tables.py)"""
        params = {
            "p_search_term": search_term,
            "p_movie_id": movie_id,
            "p_poster_url": poster_url,
        }
        try:
            response = self.client.rpc(INCREMENT_FUNCTION, params).execute()
        except (APIError, httpx.HTTPError) as e:
            self._fail("upserting search metric", e)
        row = _first(response.data)
        if not row:
            raise MetricsStoreError(f"{INCREMENT_FUNCTION} returned no row for '{search_term}'")
        return SearchMetric.from_row(row)

    def top_by_count(self, limit: int = 5) -> List[SearchMetric]:
        try:
            response = (
                self._table()
                .select("*")
                .order("count", desc=True)
                .limit(limit)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            self._fail("fetching trending searches", e)
        return [SearchMetric.from_row(row) for row in response.data or []]

    def _fail(self, context: str, error: Exception):
        code = getattr(error, "code", None)
        logger.error(f"Supabase error while {context}: {str(error)}")
        raise MetricsStoreError(f"Supabase error while {context}: {str(error)}", code=code) from error

def _first(data: Any) -> Optional[dict]:
    if isinstance(data, list):
        return data[0] if data else None
    if isinstance(data, dict):
        return data
    return None
