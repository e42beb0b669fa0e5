"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_username: str | None = None
    app_password_hash: str | None = None
    session_secret: str
    session_max_age_seconds: int = 24 * 60 * 60
    api_base_url: str
    api_key: str
    disable_auth_in_dev: bool = False
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def secure_cookies(self) -> bool:
        """Return whether session cookies should carry the Secure flag."""
        return self.environment != "local"
