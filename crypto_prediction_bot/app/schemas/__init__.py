"""Pydantic schemas for market data, predictions and status"""
from .market_data import CryptoData, MarketSentiment
from .prediction import (
    PredictionHorizons,
    PricePrediction,
    PredictionPair,
    SchedulerStatus,
    HealthResponse,
)

__all__ = [
    "CryptoData",
    "MarketSentiment",
    "PredictionHorizons",
    "PricePrediction",
    "PredictionPair",
    "SchedulerStatus",
    "HealthResponse",
]
