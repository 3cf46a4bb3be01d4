"""Client-side validation exceptions, raised before any request is sent."""

from .base import KnowledgeHubError


class ValidationError(KnowledgeHubError):
    """Input validation failed."""

    error_code = "KH_VAL_001"


class EmptyFieldError(ValidationError):
    """A required field is empty or whitespace only."""

    error_code = "KH_VAL_002"


class RequestInFlightError(ValidationError):
    """The component already has a request outstanding."""

    error_code = "KH_VAL_003"
