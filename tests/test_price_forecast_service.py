from datetime import datetime, timezone

import pytest

from crypto_prediction_bot.ai.exceptions import GeminiAPIError
from crypto_prediction_bot.ai.services.price_forecast_service import PriceForecastService


class StubGemini:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.prompts = []

    def generate_text(self, prompt, system_instruction=None):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


def test_prompt_contains_market_data(btc_data, sentiment):
    service = PriceForecastService(StubGemini())

    prompt = service.create_prompt(
        btc_data, sentiment, as_of=datetime(2026, 10, 19, tzinfo=timezone.utc))

    assert "PRICE PREDICTION analysis for BTC as of 2026-10-19" in prompt
    assert "Current Price: $67,234.50" in prompt
    assert "24h Change: 2.35%" in prompt
    assert "BTC Dominance: 54.2%" in prompt
    assert "ETH Dominance: 17.1%" in prompt
    assert "Total Market Cap: $2.45T" in prompt
    assert "CONFIDENCE:" in prompt


def test_parse_response_extracts_confidence_and_horizons(btc_data, analysis_text):
    prediction = PriceForecastService(StubGemini()).parse_response(btc_data, analysis_text)

    assert prediction.crypto == "BTC"
    assert prediction.current_price == 67234.5
    assert prediction.confidence == "High"
    assert prediction.horizons.month == "$70,000 - $74,000"
    assert prediction.horizons.half_year == "$85,000"
    assert prediction.horizons.year == "$110,000"
    assert prediction.analysis == analysis_text
    assert prediction.market_data == btc_data


def test_parse_response_handles_bold_horizon_labels(btc_data):
    text = "• **1 Month:** $71,000\n**CONFIDENCE:** low - choppy market"
    prediction = PriceForecastService(StubGemini()).parse_response(btc_data, text)

    assert prediction.horizons.month == "$71,000"
    assert prediction.confidence == "Low"


def test_parse_response_defaults(btc_data):
    prediction = PriceForecastService(StubGemini()).parse_response(btc_data, "Free form answer.")

    assert prediction.confidence == "Medium"
    assert prediction.horizons.month == "See analysis below"
    assert prediction.horizons.half_year == "See analysis below"
    assert prediction.horizons.year == "See analysis below"


def test_generate_forecast_calls_gemini_once(btc_data, sentiment, analysis_text):
    gemini = StubGemini(text=analysis_text)

    prediction = PriceForecastService(gemini).generate_forecast(btc_data, sentiment)

    assert len(gemini.prompts) == 1
    assert prediction.confidence == "High"


def test_generate_forecast_propagates_errors(btc_data, sentiment):
    service = PriceForecastService(StubGemini(error=GeminiAPIError("quota")))

    with pytest.raises(GeminiAPIError):
        service.generate_forecast(btc_data, sentiment)
