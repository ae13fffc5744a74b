"""
Configuration and settings for the products backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="")

    # Supabase (both required for live mode)
    supabase_url: Optional[str] = Field(default=None)
    supabase_key: Optional[str] = Field(default=None)

    # HTTP listener
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    log_level: str = Field(default="INFO")

    @property
    def has_backend_credentials(self) -> bool:
        return bool(
            (self.supabase_url or "").strip() and (self.supabase_key or "").strip()
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
