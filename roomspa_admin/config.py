"""Application configuration."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_parse_none_str="null",
    )

    # Application
    app_name: str = Field(default="RoomSpa Admin", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")
    reload: bool = Field(default=False, alias="RELOAD")

    # Backend REST API
    backend_api_url: str = Field(
        default="http://localhost:8000/admin/api/",
        alias="BACKEND_API_URL",
        description="Versioned root of the RoomSpa admin API",
    )
    backend_timeout: float = Field(default=10.0, alias="BACKEND_TIMEOUT")

    # Session
    secret_key: str = Field(
        default="roomspa-admin-development-secret",
        alias="SECRET_KEY",
        description="Key used to sign the session cookie",
    )
    session_cookie: str = Field(default="roomspa_admin_session", alias="SESSION_COOKIE")
    # One working day
    session_max_age: int = Field(default=8 * 60 * 60, alias="SESSION_MAX_AGE")

    # Pages
    default_page_size: int = Field(default=20, alias="DEFAULT_PAGE_SIZE")
    monitoring_poll_seconds: float = Field(default=5.0, alias="MONITORING_POLL_SECONDS")
    system_health_poll_seconds: float = Field(default=10.0, alias="SYSTEM_HEALTH_POLL_SECONDS")
    pending_request_approved_status: str = Field(
        default="accepted",
        alias="PENDING_REQUEST_APPROVED_STATUS",
        description="Status shown for a pending request once approved",
    )

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")

    @property
    def backend_base_url(self) -> str:
        """Backend root with exactly one trailing slash."""
        return self.backend_api_url.rstrip("/") + "/"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
