"""Prediction and status schemas"""
from pydantic import BaseModel, Field
from typing import Optional, Literal

from .market_data import CryptoData

DEFAULT_HORIZON_TEXT = "See analysis below"


class PredictionHorizons(BaseModel):
    """Forecast strings per horizon as stated by the model"""
    month: str = Field(default=DEFAULT_HORIZON_TEXT, description="1 month forecast")
    half_year: str = Field(default=DEFAULT_HORIZON_TEXT, description="6 month forecast")
    year: str = Field(default=DEFAULT_HORIZON_TEXT, description="1 year forecast")


class PricePrediction(BaseModel):
    """AI price prediction for one asset"""
    crypto: str = Field(..., description="Asset symbol")
    current_price: float = Field(..., ge=0, description="Price when the prediction was made")
    horizons: PredictionHorizons = Field(default_factory=PredictionHorizons)
    analysis: str = Field(..., description="Full analysis text returned by the model")
    confidence: Literal["High", "Medium", "Low"] = Field(default="Medium")
    timestamp: str = Field(..., description="ISO-8601 UTC timestamp")
    market_data: CryptoData


class PredictionPair(BaseModel):
    """Predictions for both tracked assets"""
    btc: PricePrediction
    eth: PricePrediction


class SchedulerStatus(BaseModel):
    """Daily trigger state"""
    is_running: bool
    prediction_time: str
    timezone: str
    cron_expression: str
    next_run: str = Field(..., description="Next run, ISO-8601 in the configured timezone")
    next_run_display: str = Field(..., description="Next run, human readable")
    last_run: Optional[str] = None
    last_success: Optional[str] = None
    last_error: Optional[str] = None
    run_count: int = 0
    error_count: int = 0


class HealthResponse(BaseModel):
    """Health endpoint payload"""
    status: Literal["healthy", "degraded"]
    service: str
    version: str
    environment: str
    timestamp: str
    scheduler: Optional[SchedulerStatus] = None
