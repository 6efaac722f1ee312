"""AI Service Exceptions"""
from ..app.core.exceptions import CryptoBotError, ConfigurationError


class AIServiceError(CryptoBotError):
    """Base exception for AI services"""
    pass


class GeminiAPIError(AIServiceError):
    """Exception for Gemini API errors"""
    pass


__all__ = ["AIServiceError", "GeminiAPIError", "ConfigurationError"]
