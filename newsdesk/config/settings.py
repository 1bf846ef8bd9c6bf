"""
Configuration settings for newsdesk
"""

from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Provider credentials
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    openrouter_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OPENROUTER_API_KEY"),
    )
    kimi_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("KIMI_API_KEY", "MOONSHOT_API_KEY"),
    )

    # Feeds
    feeds_path: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("NEWSDESK_FEEDS_PATH")
    )
    cache_dir: str = Field(
        default="cache/feeds", validation_alias=AliasChoices("NEWSDESK_CACHE_DIR")
    )
    feed_cache_ttl_seconds: int = Field(
        default=15 * 60, validation_alias=AliasChoices("NEWSDESK_FEED_CACHE_TTL_SECONDS")
    )

    # URL verification
    verify_timeout_seconds: float = Field(
        default=10.0, validation_alias=AliasChoices("NEWSDESK_VERIFY_TIMEOUT_SECONDS")
    )
    verify_concurrency: int = Field(
        default=5, ge=1, validation_alias=AliasChoices("NEWSDESK_VERIFY_CONCURRENCY")
    )

    # Models
    model_timeout_seconds: float = Field(
        default=60.0, gt=0, validation_alias=AliasChoices("NEWSDESK_MODEL_TIMEOUT_SECONDS")
    )

    # Logging
    log_level: str = Field(default="INFO", validation_alias=AliasChoices("NEWSDESK_LOG_LEVEL"))
    log_file: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("NEWSDESK_LOG_FILE")
    )

    def provider_credentials(self) -> dict[str, str]:
        """Map provider name to API key, empty string when unset."""
        return {
            "gemini": self.gemini_api_key or "",
            "openrouter": self.openrouter_api_key or "",
            "kimi": self.kimi_api_key or "",
        }


# Environment variables that satisfy each provider, in lookup order
PROVIDER_ENV_VARS = {
    "kimi": ["KIMI_API_KEY", "MOONSHOT_API_KEY"],
    "openrouter": ["OPENROUTER_API_KEY"],
    "gemini": ["GEMINI_API_KEY", "GOOGLE_API_KEY"],
}


def get_settings() -> Settings:
    """Load .env then build settings from the environment"""
    load_dotenv()
    return Settings()
