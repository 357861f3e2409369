import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from searchpulse.core.exceptions import MetricsStoreError
from searchpulse.core.interfaces import MetricsStoreInterface
from searchpulse.models.search_metric import SearchMetric as SearchMetricModel
from searchpulse.repositories.base_repository import BaseRepository
from searchpulse.schemas.metric import SearchMetric

logger = logging.getLogger(__name__)

def upsert_increment_statement(table, dialect_name: str, search_term: str, movie_id: int, poster_url: str):
    """INSERT ... ON CONFLICT ("searchTerm") DO UPDATE SET count = count + 1 RETURNING id"""
    insert = sqlite_insert if dialect_name == "sqlite" else pg_insert
    stmt = insert(table).values(
        searchTerm=search_term,
        count=1,
        movie_id=movie_id,
        poster_url=poster_url,
    )
    return stmt.on_conflict_do_update(
        index_elements=[table.c.searchTerm],
        set_={"count": table.c.count + 1},
    ).returning(table.c.id)

def _to_schema(row: SearchMetricModel) -> SearchMetric:
    return SearchMetric(
        id=row.id,
        search_term=row.search_term,
        count=row.count,
        movie_id=row.movie_id,
        poster_url=row.poster_url,
        created_at=row.created_at,
    )

class SearchMetricRepository(BaseRepository[SearchMetricModel], MetricsStoreInterface):
    """Metrics store backed by a SQLAlchemy session"""

    def __init__(self, db: Session):
        super().__init__(SearchMetricModel, db)

    def find_by_term(self, search_term: str) -> Optional[SearchMetric]:
        try:
            row = (
                self.db.query(self.model)
                .filter(self.model.search_term == search_term)
                .order_by(self.model.id)
                .limit(1)
                .first()
            )
        except SQLAlchemyError as e:
            self._fail("looking up search term", e)
        return _to_schema(row) if row else None

    def increment(self, metric: SearchMetric) -> SearchMetric:
        """Write count + 1 for the row, based on the count that was read"""
        try:
            row = self.get(metric.id)
            if row is None:
                raise MetricsStoreError(f"Search metric {metric.id} disappeared before update")
            return _to_schema(self.update(row, {"count": metric.count + 1}))
        except SQLAlchemyError as e:
            self._fail("incrementing search count", e)

    def insert(self, search_term: str, movie_id: int, poster_url: str) -> SearchMetric:
        try:
            row = self.create({
                "search_term": search_term,
                "count": 1,
                "movie_id": movie_id,
                "poster_url": poster_url,
            })
            return _to_schema(row)
        except SQLAlchemyError as e:
            self._fail("inserting search metric", e)

    def upsert_increment(self, search_term: str, movie_id: int, poster_url: str) -> SearchMetric:
        """Needs the unique index created by add_metrics_unique_index.py"""
        stmt = upsert_increment_statement(
            self.model.__table__, self.db.get_bind().dialect.name,
            search_term, movie_id, poster_url,
        )
        try:
            metric_id = self.db.execute(stmt).scalar_one()
            self.db.commit()
        except SQLAlchemyError as e:
            self._fail("upserting search metric", e)
        return _to_schema(self.get(metric_id))

    def top_by_count(self, limit: int = 5) -> List[SearchMetric]:
        try:
            rows = (
                self.db.query(self.model)
                .order_by(self.model.count.desc(), self.model.id)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self._fail("fetching trending searches", e)
        return [_to_schema(row) for row in rows]

    def _fail(self, context: str, error: Exception):
        self.db.rollback()
        logger.error(f"Database error while {context}: {str(error)}")
        raise MetricsStoreError(f"Database error while {context}: {str(error)}") from error
