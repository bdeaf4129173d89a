"""
Recipeshare - Configuration and settings.

All values come from the environment or a local .env file.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings.

    Supabase credentials are required; everything else has a default
    suitable for local development.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Supabase
    supabase_url: str
    supabase_anon_key: str
    supabase_service_role_key: str

    # Storage
    recipe_images_bucket: str = "recipe-images"
    image_max_size: int = 800  # Longest side of an uploaded image, in pixels

    # Application
    recipeshare_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    site_url: str = "http://localhost:8000"

    # Session cookies
    session_cookie_secure: bool = False
    session_cookie_max_age: int = 60 * 60 * 24 * 7

    @property
    def is_development(self) -> bool:
        return self.recipeshare_env == "development"

    @property
    def is_production(self) -> bool:
        return self.recipeshare_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: Settings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
