"""Configuration management using Pydantic Settings."""

from __future__ import annotations

from typing import Dict, Literal, Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from ``RESTREE_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="RESTREE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # HTTP fetch
    base_url: str = ""
    timeout_s: float = 20.0
    follow_redirects: bool = True

    # Stored credentials, only sent for jobs with credentials=True
    auth_token: Optional[SecretStr] = None
    cookies: Dict[str, str] = {}

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "console"] = "console"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
