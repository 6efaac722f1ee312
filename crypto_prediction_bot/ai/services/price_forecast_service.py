"""Price Forecast Service - Builds the analyst prompt and parses the AI answer"""
import logging
import re
from typing import Optional
from datetime import datetime, timezone

from ..services.gemini_service import GeminiService
from ...app.schemas.market_data import CryptoData, MarketSentiment
from ...app.schemas.prediction import (
    DEFAULT_HORIZON_TEXT,
    PredictionHorizons,
    PricePrediction,
)

logger = logging.getLogger(__name__)

_CONFIDENCE_PATTERN = re.compile(r"CONFIDENCE:.*?\b(High|Medium|Low)\b", re.IGNORECASE)
_HORIZON_PATTERNS = {
    "month": re.compile(r"^\W*1\s*Month\W*:\s*(.+)$", re.IGNORECASE | re.MULTILINE),
    "half_year": re.compile(r"^\W*6\s*Months?\W*:\s*(.+)$", re.IGNORECASE | re.MULTILINE),
    "year": re.compile(r"^\W*1\s*Year\W*:\s*(.+)$", re.IGNORECASE | re.MULTILINE),
}


class PriceForecastService:
    """Service for generating AI-powered price forecasts for crypto assets"""

    def __init__(self, gemini_service: Optional[GeminiService] = None):
        """
        Initialize price forecast service

        Args:
            gemini_service: Optional Gemini service instance
        """
        self.gemini_service = gemini_service or GeminiService()

    def create_prompt(
        self,
        crypto_data: CryptoData,
        sentiment: MarketSentiment,
        as_of: Optional[datetime] = None
    ) -> str:
        """
        Create the prompt for Gemini

        Args:
            crypto_data: Current market snapshot of the asset
            sentiment: Global market snapshot
            as_of: Date the analysis is made for, defaults to today (UTC)

        Returns:
            Formatted prompt string
        """
        current_date = (as_of or datetime.now(timezone.utc)).strftime("%Y-%m-%d")
        crypto = crypto_data.symbol
        total_cap_trillions = sentiment.total_market_cap / 1_000_000_000_000

        return f"""You are a world-class cryptocurrency research analyst with extensive experience in quantitative analysis, institutional trading, and blockchain technology research.

Perform a DEEP RESEARCH-DRIVEN PRICE PREDICTION analysis for {crypto} as of {current_date}.

**RESEARCH METHODOLOGY:** Use advanced analytical frameworks including Elliott Wave Theory, Fibonacci retracements, on-chain metrics, network value models, and comparative valuation methods.

**CURRENT MARKET DATA:**
- Current Price: ${crypto_data.price:,.2f}
- 24h Change: {crypto_data.change_24h:.2f}%
- 24h Volume: ${crypto_data.volume_24h:,.0f}
- Market Cap: ${crypto_data.market_cap:,.0f}
- BTC Dominance: {sentiment.btc_dominance:.1f}%
- ETH Dominance: {sentiment.eth_dominance:.1f}%
- Total Market Cap: ${total_cap_trillions:.2f}T

**ANALYSIS REQUIREMENTS:**
Provide detailed price predictions for:
1. **1 Month** (30 days from now)
2. **6 Months** (180 days from now)
3. **1 Year** (365 days from now)

**DEEP RESEARCH ANALYSIS REQUIRED:**

🔬 **ADVANCED TECHNICAL ANALYSIS:**
- Multi-timeframe trend analysis (daily, weekly, monthly)
- Advanced indicators: RSI, MACD, Bollinger Bands, Ichimoku Cloud
- Elliott Wave patterns and Fibonacci levels
- Volume profile and order flow analysis
- Support/resistance clusters and pivot points

📊 **ON-CHAIN & FUNDAMENTAL RESEARCH:**
- Network hash rate and security metrics
- Active addresses, transaction volume, and network fees
- HODL patterns and long-term holder behavior
- Developer activity and institutional adoption, ETF flows
- Staking ratios and yield dynamics

🌍 **MACRO & SENTIMENT DEEP DIVE:**
- Federal Reserve policy and global liquidity conditions
- Institutional money flow and market structure
- Social sentiment and derivatives positioning
- Cross-asset correlations (Gold, NASDAQ, bonds)

📈 **QUANTITATIVE MODELS:**
- Stock-to-Flow, NVT ratio, MVRV analysis
- Logarithmic growth curves and network valuation

**RESPOND IN THIS SIMPLE FORMAT:**

🎯 **PRICE PREDICTIONS:**
• 1 Month: [Your prediction]
• 6 Months: [Your prediction]
• 1 Year: [Your prediction]

📊 **KEY ANALYSIS:**
[Provide 2-3 concise paragraphs covering your most important insights about technical trends, fundamental drivers, and market sentiment that led to these predictions]

⚖️ **CONFIDENCE:** [High/Medium/Low] - [Brief explanation]

⚠️ **MAJOR RISKS:** [List 2-3 key risk factors]

🚀 **CATALYSTS:** [List 2-3 key positive drivers]

Keep your response focused, clear, and actionable. No need for complex formatting - just solid analysis.
"""

    @staticmethod
    def _extract_horizon(text: str, key: str) -> str:
        match = _HORIZON_PATTERNS[key].search(text)
        if not match:
            return DEFAULT_HORIZON_TEXT
        value = match.group(1).strip().strip("*").strip()
        return value or DEFAULT_HORIZON_TEXT

    def parse_response(self, crypto_data: CryptoData, response: str) -> PricePrediction:
        """
        Turn the model answer into a PricePrediction

        The full answer is kept as the analysis; confidence and horizon
        lines are extracted when present, defaults are used otherwise.
        """
        confidence_match = _CONFIDENCE_PATTERN.search(response)
        confidence = confidence_match.group(1).capitalize() if confidence_match else "Medium"

        horizons = PredictionHorizons(
            month=self._extract_horizon(response, "month"),
            half_year=self._extract_horizon(response, "half_year"),
            year=self._extract_horizon(response, "year"),
        )

        return PricePrediction(
            crypto=crypto_data.symbol,
            current_price=crypto_data.price,
            horizons=horizons,
            analysis=response,
            confidence=confidence,
            timestamp=datetime.now(timezone.utc).isoformat(),
            market_data=crypto_data,
        )

    def generate_forecast(
        self,
        crypto_data: CryptoData,
        sentiment: MarketSentiment
    ) -> PricePrediction:
        """
        Generate a forecast for one asset

        Raises:
            GeminiAPIError: If the inference call fails
        """
        prompt = self.create_prompt(crypto_data, sentiment)
        text = self.gemini_service.generate_text(prompt)
        prediction = self.parse_response(crypto_data, text)
        logger.info(
            f"✅ Generated {crypto_data.symbol} forecast "
            f"(confidence: {prediction.confidence}, {len(text)} chars)")
        return prediction
