"""Custom exception classes and the HTTP error handler for the health app"""
from datetime import datetime
from fastapi import Request, status
from fastapi.responses import JSONResponse
import logging

logger = logging.getLogger(__name__)


class CryptoBotError(Exception):
    """Base exception for the prediction bot"""
    pass


class ConfigurationError(CryptoBotError):
    """Required configuration is missing or invalid"""
    pass


class MarketDataError(CryptoBotError):
    """Market data could not be fetched or was malformed"""
    pass


class PredictionError(CryptoBotError):
    """A price prediction could not be produced"""
    pass


class TelegramDeliveryError(CryptoBotError):
    """A message could not be delivered to the chat"""
    pass


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unhandled exceptions"""
    logger.exception(f"Unhandled exception: {type(exc).__name__}: {str(exc)}")

    is_development = False
    if hasattr(request.app.state, 'settings'):
        is_development = request.app.state.settings.environment == "development"

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "status": "error",
            "message": "An unexpected error occurred",
            "error_code": "INTERNAL_ERROR",
            "timestamp": datetime.now().isoformat(),
            "details": (
                {"error": str(exc)}
                if is_development
                else {}
            )
        }
    )
