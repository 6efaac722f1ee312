"""Market data service backed by the CoinGecko public API"""
import logging
import concurrent.futures
from typing import Dict, Optional, Tuple

import requests

from ..core.config import settings
from ..core.assets import get_asset_info
from ..core.exceptions import MarketDataError
from ..schemas.market_data import CryptoData, MarketSentiment

logger = logging.getLogger(__name__)

# Used when the /global endpoint is unavailable
FALLBACK_SENTIMENT = MarketSentiment(
    fear_greed_index=50,
    btc_dominance=45.0,
    eth_dominance=18.0,
    total_market_cap=2_000_000_000_000,
)


class MarketDataService:
    """Service for fetching real-time crypto market data"""

    def __init__(
        self,
        api_base: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None
    ):
        self.api_base = (api_base or settings.coingecko_api_base).rstrip("/")
        self.timeout = timeout or settings.request_timeout
        self.session = session or requests.Session()

    def _get_json(self, path: str, params: Optional[Dict] = None) -> Dict:
        url = f"{self.api_base}{path}"
        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def get_crypto_data(self, symbol: str) -> CryptoData:
        """
        Fetch the current market snapshot for an asset

        Args:
            symbol: Asset symbol (BTC or ETH)

        Returns:
            CryptoData snapshot

        Raises:
            MarketDataError: On transport errors, HTTP errors or missing data
        """
        symbol = symbol.upper()
        asset = get_asset_info(symbol)
        params = {
            "ids": asset.coin_id,
            "vs_currencies": "usd",
            "include_24hr_change": "true",
            "include_24hr_vol": "true",
            "include_market_cap": "true",
            "include_24hr_high": "true",
            "include_24hr_low": "true",
        }

        try:
            payload = self._get_json("/simple/price", params=params)
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Error fetching crypto data for {symbol}: {e}")
            raise MarketDataError(
                f"Could not fetch market data for {symbol}: {e}") from e

        logger.debug(f"CoinGecko response for {asset.coin_id}: {payload}")

        data = payload.get(asset.coin_id) if isinstance(payload, dict) else None
        if not data:
            raise MarketDataError(f"No data returned for {asset.coin_id}")

        return CryptoData(
            symbol=symbol,
            price=data.get("usd") or 0,
            change_24h=data.get("usd_24h_change") or 0,
            volume_24h=data.get("usd_24h_vol") or 0,
            market_cap=data.get("usd_market_cap") or 0,
            high_24h=data.get("usd_24h_high") or 0,
            low_24h=data.get("usd_24h_low") or 0,
        )

    def get_market_sentiment(self) -> MarketSentiment:
        """
        Fetch global market figures (dominance, total market cap)

        Falls back to a fixed snapshot when the endpoint fails, the
        prediction can still be made from the asset data alone.
        """
        try:
            payload = self._get_json("/global")
            data = payload.get("data") or {}
            dominance = data.get("market_cap_percentage") or {}
            total_cap = data.get("total_market_cap") or {}
            return MarketSentiment(
                btc_dominance=dominance.get("btc") or dominance.get("bitcoin") or 0,
                eth_dominance=dominance.get("eth") or dominance.get("ethereum") or 0,
                total_market_cap=total_cap.get("usd") or 0,
            )
        except (requests.exceptions.RequestException, ValueError, AttributeError) as e:
            logger.warning(f"Error fetching market sentiment, using fallback: {e}")
            return FALLBACK_SENTIMENT.model_copy()

    def get_market_snapshot(self, symbol: str) -> Tuple[CryptoData, MarketSentiment]:
        """Fetch asset data and market sentiment concurrently"""
        with concurrent.futures.ThreadPoolExecutor(max_workers=2) as executor:
            crypto_future = executor.submit(self.get_crypto_data, symbol)
            sentiment_future = executor.submit(self.get_market_sentiment)
            return crypto_future.result(), sentiment_future.result()
