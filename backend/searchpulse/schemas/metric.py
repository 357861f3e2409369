from pydantic import BaseModel, Field, field_validator
from typing import Optional, Any, Dict
from datetime import datetime

from searchpulse.core.enums import RecordOutcome, FailureKind

class SearchMetric(BaseModel):
    """A row of the metrics table.

    The hosted table keeps ``searchTerm`` in camel case and the rest in snake
    case; aliases map both spellings so rows from Supabase and ORM objects
    validate the same way.
    """
    id: Optional[int] = None
    search_term: str = Field(..., alias="searchTerm")
    count: int = 1
    movie_id: Optional[int] = None
    poster_url: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        populate_by_name = True

    @field_validator("count", mode="before")
    @classmethod
    def null_count_is_zero(cls, v):
        return 0 if v is None else v

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "SearchMetric":
        return cls.model_validate(row)

class MovieRef(BaseModel):
    """The two movie fields the recorder consumes"""
    id: int
    poster_path: Optional[str] = None

class SearchCountCreate(BaseModel):
    """Record search count request"""
    search_term: str = Field(..., min_length=1, description="Raw user search string")
    movie: MovieRef

class RecordResult(BaseModel):
    """Outcome of a search-count write"""
    outcome: RecordOutcome
    search_term: str
    count: Optional[int] = None
    failure: Optional[FailureKind] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome != RecordOutcome.FAILED

class TrendingSearchResponse(BaseModel):
    """Trending search terms"""
    search_term: str
    count: int
    movie_id: Optional[int] = None
    poster_url: Optional[str] = None
