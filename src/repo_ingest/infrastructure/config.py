"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_token: SecretStr | None = None
    require_github_token: bool = False
    github_api_url: str = "https://api.github.com"
    github_proxy: str | None = None
    request_timeout_s: float = 30.0
    fetch_concurrency: int = Field(default=8, ge=1, le=32)
    default_max_files: int = 5
    context_token_budget: int = 32_000
    local_max_file_size_bytes: int = 1_000_000
    # POST /api/local is disabled unless a root directory is configured
    local_ingest_root: Path | None = None
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()
