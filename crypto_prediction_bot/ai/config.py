"""AI Configuration"""
import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..app.core.config import find_env_file

logger = logging.getLogger(__name__)

_env_file_path = find_env_file()


class AIConfig(BaseSettings):
    """Configuration for the Gemini inference service (GEMINI_* variables)"""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=_env_file_path if _env_file_path else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )

    api_key: Optional[str] = Field(
        default=None,
        description="Google Gemini API key"
    )
    # v1beta serves the 2.5 model family and systemInstruction
    model: str = Field(
        default="gemini-2.5-pro",
        description="Gemini model name"
    )
    api_base: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Gemini REST API base URL"
    )
    temperature: Optional[float] = Field(
        default=None,
        ge=0,
        le=2,
        description="Sampling temperature, model default when unset"
    )
    max_tokens: Optional[int] = Field(
        default=None,
        ge=1,
        description="Maximum output tokens, model default when unset"
    )
    request_timeout: int = Field(
        default=120,
        gt=0,
        description="Inference request timeout in seconds"
    )

    def is_configured(self) -> bool:
        """Check if Gemini API is properly configured"""
        return self.api_key is not None and len(self.api_key.strip()) > 0


@lru_cache()
def get_ai_config() -> AIConfig:
    """Get cached AI config instance"""
    config = AIConfig()
    if config.is_configured():
        logger.debug(f"Gemini API key loaded (length: {len(config.api_key)})")
    else:
        logger.debug("GEMINI_API_KEY not found in environment variables")
    return config


ai_config = get_ai_config()
