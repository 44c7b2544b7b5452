"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. SECRET_KEY is validated at load time; Firebase
credentials are optional so the service can start without a data store.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except secret_key, which is
    checked in validate_required.
    """

    # App
    app_name: str = "civic-admin"
    app_version: str = "1.0.0"
    debug: bool = False

    # Security (bearer tokens are verified, not issued, by this service)
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 hours

    # CORS: the admin SPA origins
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Request / middleware
    request_timeout_seconds: int = 60
    max_request_size: int = 2 * 1024 * 1024  # 2MB
    request_id_header: str = "X-Request-ID"
    correlation_id_header: str = "X-Correlation-ID"
    rate_limit_enabled: bool = True

    # Firebase / Firestore: use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None  # Path to JSON file

    # Outbound HTTP
    outbound_http_timeout_seconds: float = 30.0
    expo_push_url: str = "https://exp.host/--/api/v2/push/send"

    # Image analysis (Gemini); disabled when no key is set
    gemini_api_key: SecretStr | None = None
    gemini_model: str = "gemini-2.0-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # Auto-assignment background loop (stand-in for the real-time listener)
    auto_assign_enabled: bool = True
    auto_assign_poll_seconds: int = 30

    # Analytics
    analytics_default_days: int = 30

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required env and numeric ranges."""
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if self.auto_assign_poll_seconds < 1:
            raise ValueError("AUTO_ASSIGN_POLL_SECONDS must be at least 1")
        if self.analytics_default_days < 1:
            raise ValueError("ANALYTICS_DEFAULT_DAYS must be at least 1")
        return self

    @property
    def image_analysis_enabled(self) -> bool:
        """True when a Gemini API key is configured."""
        return bool(
            self.gemini_api_key and self.gemini_api_key.get_secret_value()
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
