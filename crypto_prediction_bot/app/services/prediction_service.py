"""Prediction service - market data plus AI forecast per asset"""
import logging
import concurrent.futures
from typing import Optional

from ..core.exceptions import PredictionError
from ..schemas.prediction import PricePrediction, PredictionPair
from .market_data_service import MarketDataService
from ...ai.services.price_forecast_service import PriceForecastService

logger = logging.getLogger(__name__)


class PredictionService:
    """Produces AI price predictions for the tracked assets"""

    def __init__(
        self,
        market_data_service: Optional[MarketDataService] = None,
        forecast_service: Optional[PriceForecastService] = None
    ):
        self.market_data_service = market_data_service or MarketDataService()
        self.forecast_service = forecast_service or PriceForecastService()

    def get_price_prediction(self, symbol: str) -> PricePrediction:
        """
        Fetch market data and ask the model for a forecast

        Args:
            symbol: Asset symbol (BTC or ETH)

        Returns:
            PricePrediction for the asset

        Raises:
            PredictionError: If market data or inference fails
        """
        try:
            crypto_data, sentiment = self.market_data_service.get_market_snapshot(symbol)
            return self.forecast_service.generate_forecast(crypto_data, sentiment)
        except Exception as e:
            logger.error(f"Error getting prediction for {symbol}: {e}")
            raise PredictionError(f"Failed to get prediction for {symbol}: {e}") from e

    def get_both_predictions(self) -> PredictionPair:
        """
        Predict BTC and ETH concurrently

        Raises:
            PredictionError: If either prediction fails
        """
        logger.info("🔄 Fetching real-time crypto data and generating AI predictions...")

        with concurrent.futures.ThreadPoolExecutor(max_workers=2) as executor:
            btc_future = executor.submit(self.get_price_prediction, "BTC")
            eth_future = executor.submit(self.get_price_prediction, "ETH")
            pair = PredictionPair(btc=btc_future.result(), eth=eth_future.result())

        logger.info("✅ Successfully generated both BTC and ETH predictions")
        return pair
