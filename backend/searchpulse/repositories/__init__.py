from .base_repository import BaseRepository
from .search_metric_repository import SearchMetricRepository
from .supabase_metric_repository import SupabaseMetricsRepository

__all__ = [
    "BaseRepository",
    "SearchMetricRepository",
    "SupabaseMetricsRepository"
]
