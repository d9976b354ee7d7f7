"""Client configuration via pydantic-settings.

Reads from .env file or environment variables. Only the Custom network
endpoints and the polling ceiling flag are consulted by the verification
pipeline itself; the rest tune transport, toolchain and logging.

Usage:
    from voyager_verifier.config import get_settings
    settings = get_settings()
    print(settings.custom_public_api_endpoint_url)
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the verification client."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Logging ---
    app_log_level: str = "INFO"
    app_log_json: bool = False

    # --- Custom network endpoints ---
    # Empty means "not configured"; callers reject it at use time.
    custom_internal_api_endpoint_url: str = ""
    custom_public_api_endpoint_url: str = ""

    # --- Verification service ---
    voyager_api_key: str = ""
    http_timeout_seconds: float = 30.0

    # --- Polling ---
    use_polling_max_retries: bool = False
    polling_interval_seconds: float = 5.0
    default_max_retries: int = 10

    # --- Toolchain ---
    scarb_binary: str = "scarb"
    compile_timeout_seconds: int = 600

    @property
    def api_headers(self) -> dict[str, str]:
        """Headers sent with every request to the verification service."""
        if not self.voyager_api_key:
            return {}
        return {"x-api-key": self.voyager_api_key}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton of the client settings."""
    return Settings()
