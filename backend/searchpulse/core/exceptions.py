from fastapi import status

class BaseAppException(Exception):
    """Base exception for application"""
    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

class MetricsStoreError(BaseAppException):
    """Raised when the metrics table cannot be read or written"""
    def __init__(self, message: str = "Metrics store error", code: str = None):
        self.code = code
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE)

    def to_dict(self):
        """Return error response as dictionary with error code"""
        return {
            "error_code": self.code or "METRICS_STORE_ERROR",
            "message": self.message,
            "status_code": self.status_code
        }

class MetricsStoreNotConfiguredException(BaseAppException):
    """Raised when no metrics store could be built from settings"""
    def __init__(self, message: str = "Metrics store is not configured"):
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE)

class MovieNotFoundException(BaseAppException):
    """Raised when TMDB has no movie for the given id"""
    def __init__(self, message: str = "Movie not found"):
        super().__init__(message, status.HTTP_404_NOT_FOUND)

class TMDBUnavailableException(BaseAppException):
    """Raised when TMDB requests fail"""
    def __init__(self, message: str = "Movie metadata provider unavailable"):
        super().__init__(message, status.HTTP_502_BAD_GATEWAY)
