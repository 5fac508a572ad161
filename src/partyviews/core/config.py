"""Configuration management for partyviews."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import ErrorConstants, FileConstants


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenAI API
    openai_api_key: str = Field("", description="OpenAI API key")
    openai_model: str = Field("gpt-4o-mini", description="Chat model used by the oracle")

    # Logging
    log_level: str = Field("INFO", description="Logging level")

    # Storage
    cache_dir: str = Field(FileConstants.CACHE_DIR, description="Oracle response cache directory")
    cooldown_dir: str = Field(FileConstants.COOLDOWN_DIR, description="Refresh cooldown directory")

    # Party refresh rate limits
    party_refresh_global_cooldown: float = Field(30.0, description="Seconds between any two refreshes")
    party_refresh_user_cooldown: float = Field(60.0, description="Seconds between refreshes by one user")

    # Oracle calls
    max_retries: int = Field(ErrorConstants.MAX_RETRY_ATTEMPTS, description="Maximum retry attempts")
    retry_delay: float = Field(1.0, description="Base retry delay in seconds")
    retry_backoff: float = Field(2.0, description="Retry backoff multiplier")
    request_timeout: float = Field(ErrorConstants.REQUEST_TIMEOUT, description="Oracle request timeout")

    @property
    def has_openai_key(self) -> bool:
        return bool(self.openai_api_key.strip())


# Global settings instance
settings = Settings()
