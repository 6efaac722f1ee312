"""Application configuration using Pydantic Settings"""
import re
from pathlib import Path
from typing import Optional, Literal
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

_TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


def find_env_file() -> Optional[str]:
    """Find .env file in project root or current directory"""
    try:
        # Project root is 4 levels up: crypto_prediction_bot/app/core/config.py
        project_root = Path(__file__).resolve().parent.parent.parent.parent
        env_path = project_root / ".env"
        if env_path.exists() and env_path.is_file():
            return str(env_path)

        env_path = Path.cwd() / ".env"
        if env_path.exists() and env_path.is_file():
            return str(env_path)
    except OSError:
        pass
    return None


_env_file_path = find_env_file()


class Settings(BaseSettings):
    """Bot settings with Pydantic validation and type safety"""

    model_config = SettingsConfigDict(
        env_file=_env_file_path if _env_file_path else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
        env_ignore_empty=True,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level"
    )

    # Telegram
    telegram_bot_token: Optional[str] = Field(
        default=None,
        description="Telegram bot token"
    )
    telegram_chat_id: Optional[str] = Field(
        default=None,
        description="Telegram chat id predictions are delivered to"
    )
    telegram_api_base: str = Field(
        default="https://api.telegram.org",
        description="Telegram Bot API base URL"
    )

    # Schedule
    prediction_time: str = Field(
        default="09:00",
        description="Daily send time in HH:MM (24h)"
    )
    timezone: str = Field(
        default="UTC",
        description="IANA timezone the prediction time is expressed in"
    )
    message_delay_seconds: float = Field(
        default=2.0,
        ge=0,
        description="Delay between the two prediction messages"
    )
    status_log_interval: int = Field(
        default=3600,
        ge=60,
        description="Interval of the scheduler heartbeat log in seconds"
    )

    # Market data
    coingecko_api_base: str = Field(
        default="https://api.coingecko.com/api/v3",
        description="CoinGecko API base URL"
    )
    request_timeout: int = Field(
        default=30,
        gt=0,
        description="HTTP timeout for market data and Telegram calls"
    )

    # Health server
    host: str = Field(default="0.0.0.0", description="Health server host")
    port: int = Field(
        default=3000,
        gt=0,
        le=65535,
        description="Health server port"
    )

    @field_validator("prediction_time", mode="before")
    @classmethod
    def validate_prediction_time(cls, v):
        """Require HH:MM with a valid hour and minute"""
        value = str(v).strip()
        if not _TIME_PATTERN.match(value):
            raise ValueError(
                f"PREDICTION_TIME must be HH:MM (00:00-23:59), got {v!r}")
        return value

    @field_validator("timezone", mode="before")
    @classmethod
    def validate_timezone(cls, v):
        """Require a timezone known to the tz database"""
        value = str(v).strip()
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown TIMEZONE: {v!r}")
        return value

    @field_validator("telegram_chat_id", mode="before")
    @classmethod
    def parse_chat_id(cls, v):
        """Chat ids may arrive as integers"""
        if v is None:
            return v
        return str(v).strip()


def validate_config(settings: Settings, ai_config) -> None:
    """Ensure everything needed to run the bot is configured

    Raises:
        ConfigurationError: If a required value is missing
    """
    if not settings.telegram_bot_token:
        raise ConfigurationError("TELEGRAM_BOT_TOKEN is required")
    if not settings.telegram_chat_id:
        raise ConfigurationError("TELEGRAM_CHAT_ID is required")
    if not ai_config.is_configured():
        raise ConfigurationError("GEMINI_API_KEY is required")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)"""
    return Settings()


settings = get_settings()
