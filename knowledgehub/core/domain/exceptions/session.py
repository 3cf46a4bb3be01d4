"""Session and permission exceptions."""

from .base import KnowledgeHubError


class SessionError(KnowledgeHubError):
    """Base class for session problems."""

    error_code = "KH_SES_001"


class NotAuthenticatedError(SessionError):
    """Operation requires a logged-in user."""

    error_code = "KH_SES_002"


class PermissionDeniedError(SessionError):
    """The current user may not modify this document."""

    error_code = "KH_SES_003"
