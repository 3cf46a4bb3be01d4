"""Configuration-related exceptions for the KnowledgeHub client."""

from .base import KnowledgeHubError


class ConfigurationError(KnowledgeHubError):
    """Configuration or environment variable errors.

    Raised when required configuration is missing or invalid.
    """

    error_code = "KH_CFG_001"


class InvalidConfigurationError(ConfigurationError):
    """Configuration value is invalid."""

    error_code = "KH_CFG_002"
