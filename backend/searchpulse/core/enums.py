from enum import Enum

class RecordOutcome(str, Enum):
    """What a search-count write did"""
    CREATED = "created"
    INCREMENTED = "incremented"
    FAILED = "failed"

class FailureKind(str, Enum):
    """Which step of a search-count write failed"""
    INVALID = "invalid"
    LOOKUP = "lookup"
    WRITE = "write"

class MetricsBackend(str, Enum):
    SUPABASE = "supabase"
    SQL = "sql"
