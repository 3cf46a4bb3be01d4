"""Configuration management for the KnowledgeHub client."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _sanitize_url(value: str) -> str:
    """Remove BOM characters, whitespace and trailing slashes from a URL.

    Values pasted into .env files or CI secrets sometimes carry a BOM,
    which would otherwise end up in every request URL.
    """
    if not value:
        return value
    return value.lstrip("\ufeff").strip().rstrip("/")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Backend API
    api_url: str = "http://localhost:5000"
    request_timeout: float = 30.0

    # Local storage
    data_dir: Path = Path("./data")
    storage_file: str = "local_storage.db"

    # Logging
    log_level: str = "INFO"
    log_file: Path | None = None
    json_logs: bool = False

    # Show full structured errors in the CLI
    debug: bool = False

    @field_validator("api_url", mode="after")
    @classmethod
    def validate_api_url(cls, value: str) -> str:
        """Sanitize the base URL and require an http(s) scheme."""
        value = _sanitize_url(value)
        if not value.startswith(("http://", "https://")):
            raise ValueError("api_url must start with http:// or https://")
        return value

    @property
    def storage_path(self) -> Path:
        """SQLite file backing durable local storage."""
        return self.data_dir / self.storage_file

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
