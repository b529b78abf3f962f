"""
Shared kernel: exception hierarchy and async helpers.
"""

from .async_utils import (
    CircuitBreaker,
    gather_with_errors,
    run_in_background,
    timeout_with_fallback,
)
from .exceptions import (
    APIError,
    CatalogSearchError,
    ConfigurationError,
    DataError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    InvalidQueryError,
    MalformedGraphError,
    NetworkError,
    NotFoundError,
    ParseError,
    RateLimitError,
    ServiceUnavailableError,
    ValidationError,
)

__all__ = [
    # Exceptions
    "CatalogSearchError",
    "ErrorContext",
    "ErrorSeverity",
    "ErrorCategory",
    "APIError",
    "RateLimitError",
    "NetworkError",
    "ServiceUnavailableError",
    "ValidationError",
    "InvalidQueryError",
    "DataError",
    "NotFoundError",
    "ParseError",
    "MalformedGraphError",
    "ConfigurationError",
    # Async utilities
    "gather_with_errors",
    "run_in_background",
    "CircuitBreaker",
    "timeout_with_fallback",
]
