from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from eteon.domain.errors import ConfigurationError


class Settings(BaseSettings):
    """Runtime configuration read from the environment and an optional .env file"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    telegram_bot_token: str = Field("", alias="TELEGRAM_BOT_TOKEN")
    gemini_api_key: str = Field("", alias="GEMINI_API_KEY")

    gemini_model: str = Field("gemini-2.5-pro", alias="GEMINI_MODEL")
    request_timeout_seconds: float = Field(120.0, alias="REQUEST_TIMEOUT_SECONDS")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_format: str = Field("console", alias="LOG_FORMAT", description="json or console")

    webhook_url: Optional[str] = Field(None, alias="WEBHOOK_URL", description="Public URL; enables webhook mode")
    webhook_secret: Optional[str] = Field(None, alias="WEBHOOK_SECRET")
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(8000, alias="PORT")

    def validate_secrets(self) -> "Settings":
        """Raise ConfigurationError when a required secret is missing"""

        if not self.telegram_bot_token.strip():
            raise ConfigurationError("TELEGRAM_BOT_TOKEN is required")
        if not self.gemini_api_key.strip():
            raise ConfigurationError("GEMINI_API_KEY is required")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
