"""Custom exception hierarchy for the KnowledgeHub client.

Each exception includes:
- Error codes for quick identification
- Automatic capture of class, method, file, and line number
- Cause chaining for underlying exceptions
- JSON serialization for structured logging

Import from this package directly:

    from knowledgehub.core.domain.exceptions import HttpError, NetworkError
"""

# Base classes
from .base import ExceptionContext, KnowledgeHubError

# Remote API exceptions
from .api import ApiError, HttpError, InvalidResponseError, NetworkError

# Configuration exceptions
from .configuration import ConfigurationError, InvalidConfigurationError

# Session exceptions
from .session import NotAuthenticatedError, PermissionDeniedError, SessionError

# Storage exceptions
from .storage import StorageError

# Validation exceptions
from .validation import EmptyFieldError, RequestInFlightError, ValidationError

__all__ = [
    # Base
    "ExceptionContext",
    "KnowledgeHubError",
    # API
    "ApiError",
    "NetworkError",
    "HttpError",
    "InvalidResponseError",
    # Configuration
    "ConfigurationError",
    "InvalidConfigurationError",
    # Session
    "SessionError",
    "NotAuthenticatedError",
    "PermissionDeniedError",
    # Storage
    "StorageError",
    # Validation
    "ValidationError",
    "EmptyFieldError",
    "RequestInFlightError",
]
