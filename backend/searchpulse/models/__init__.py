from searchpulse.db import Base
from .search_metric import SearchMetric

__all__ = ['SearchMetric']
