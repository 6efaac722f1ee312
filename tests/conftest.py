import pytest

from crypto_prediction_bot.app.schemas.market_data import CryptoData, MarketSentiment
from crypto_prediction_bot.app.schemas.prediction import PricePrediction


@pytest.fixture
def btc_data() -> CryptoData:
    return CryptoData(
        symbol="BTC",
        price=67234.5,
        change_24h=2.3456,
        volume_24h=28_500_000_000,
        market_cap=1_325_000_000_000,
        high_24h=68000,
        low_24h=65000,
    )


@pytest.fixture
def eth_data() -> CryptoData:
    return CryptoData(
        symbol="ETH",
        price=3120.0,
        change_24h=-1.2,
        volume_24h=14_000_000_000,
        market_cap=375_000_000_000,
    )


@pytest.fixture
def sentiment() -> MarketSentiment:
    return MarketSentiment(
        btc_dominance=54.2,
        eth_dominance=17.1,
        total_market_cap=2_450_000_000_000,
    )


@pytest.fixture
def analysis_text() -> str:
    return (
        "🎯 **PRICE PREDICTIONS:**\n"
        "• 1 Month: $70,000 - $74,000\n"
        "• 6 Months: $85,000\n"
        "• 1 Year: $110,000\n"
        "\n"
        "📊 **KEY ANALYSIS:**\n"
        "Momentum remains constructive above the 200-day average.\n"
        "\n"
        "⚖️ **CONFIDENCE:** High - strong on-chain accumulation\n"
    )


def make_prediction(crypto_data: CryptoData, analysis: str = "Analysis text") -> PricePrediction:
    return PricePrediction(
        crypto=crypto_data.symbol,
        current_price=crypto_data.price,
        analysis=analysis,
        confidence="Medium",
        timestamp="2026-10-19T09:00:00+00:00",
        market_data=crypto_data,
    )


@pytest.fixture
def btc_prediction(btc_data) -> PricePrediction:
    return make_prediction(btc_data, "BTC analysis")


@pytest.fixture
def eth_prediction(eth_data) -> PricePrediction:
    return make_prediction(eth_data, "ETH analysis")
