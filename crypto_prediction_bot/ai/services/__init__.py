"""AI Services"""
from .gemini_service import GeminiService
from .price_forecast_service import PriceForecastService

__all__ = ["GeminiService", "PriceForecastService"]
