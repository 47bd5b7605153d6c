"""Application settings and configuration.

This module defines all configuration options for the chili cook-off voting
service. Settings are loaded from environment variables with sensible defaults.
"""

from datetime import datetime

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Chili Cook-off", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./chili.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Privileged (admin) sessions
    admin_password: str | None = Field(default=None, alias="ADMIN_PASSWORD")
    admin_session_hours: int = Field(default=24, alias="ADMIN_SESSION_HOURS")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")

    # Ballot-stuffing checks
    vote_validation_fail_open: bool = Field(default=True, alias="VOTE_VALIDATION_FAIL_OPEN")
    ip_vote_window_seconds: int = Field(default=300, alias="IP_VOTE_WINDOW_SECONDS")
    trust_forwarded_for: bool = Field(default=False, alias="TRUST_FORWARDED_FOR")
    trusted_proxies: list[str] = Field(default_factory=list, alias="TRUSTED_PROXIES")

    # Entry intake and editing
    google_forms_api_key: str | None = Field(default=None, alias="GOOGLE_FORMS_API_KEY")
    event_date: datetime | None = Field(default=None, alias="EVENT_DATE")
    entry_code_max_attempts: int = Field(default=10, alias="ENTRY_CODE_MAX_ATTEMPTS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        populate_by_name=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()  # type: ignore[call-arg]
