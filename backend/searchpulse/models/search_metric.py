from sqlalchemy import Column, Integer, String, DateTime, Index
from sqlalchemy.sql import func
from searchpulse.db import Base

class SearchMetric(Base):
    __tablename__ = "metrics"
    id = Column(Integer, primary_key=True, index=True)
    # camelCase column name is what the frontend reads
    search_term = Column("searchTerm", String, nullable=False)
    count = Column(Integer, nullable=False, default=1, server_default="1")
    movie_id = Column(Integer, nullable=True)
    poster_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        # Non-unique: duplicate rows per term are possible in read-then-write mode.
        # add_metrics_unique_index.py replaces it with a unique one for atomic mode.
        Index("ix_metrics_search_term", "searchTerm"),
    )
