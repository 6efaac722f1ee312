"""Telegram message templates"""
import re
from datetime import datetime, timezone
from typing import Optional

from ..schemas.prediction import PricePrediction
from ..core.assets import SUPPORTED_ASSETS, AssetInfo

# Telegram caps messages at 4096 characters, keep headroom for the footer
MAX_MESSAGE_LENGTH = 3800
TRUNCATION_SUFFIX = "... [Analysis truncated]"
SEPARATOR = "━━━━━━━━━━━━━━━━━━━━━━"
FOOTER = "🤖 *Powered by Google Gemini AI + Real-time CoinGecko Data*"

_BOLD_PATTERN = re.compile(r"\*([^*]+)\*")


def format_date(now: Optional[datetime] = None) -> str:
    """Long date, e.g. Monday, October 19, 2026 (day of month not padded)"""
    now = now or datetime.now(timezone.utc)
    return f"{now:%A}, {now:%B} {now.day}, {now.year}"


def format_price(value: float) -> str:
    """Price with thousands separators and at most two decimals"""
    formatted = f"{value:,.2f}"
    if formatted.endswith(".00"):
        formatted = formatted[:-3]
    return formatted


def strip_markdown(message: str) -> str:
    """Remove *bold* markers so the text can be sent without parse mode"""
    return _BOLD_PATTERN.sub(r"\1", message)


def format_prediction_message(
    prediction: PricePrediction,
    now: Optional[datetime] = None
) -> str:
    """
    Build the daily message for one asset

    The analysis is truncated so the message body stays within
    MAX_MESSAGE_LENGTH before the footer is appended.
    """
    asset = SUPPORTED_ASSETS.get(
        prediction.crypto,
        AssetInfo(prediction.crypto.lower(), prediction.crypto, "🪙"))
    market_cap_billions = prediction.market_data.market_cap / 1_000_000_000

    message = (
        f"🚀 *Daily Crypto Price Prediction* 🚀\n"
        f"📅 {format_date(now)}\n"
        f"\n"
        f"{SEPARATOR}\n"
        f"\n"
        f"{asset.emoji} *{asset.name} ANALYSIS*\n"
        f"💰 *Current Price:* ${format_price(prediction.current_price)}\n"
        f"📈 *24h Change:* {prediction.market_data.change_24h:.2f}%\n"
        f"💸 *Market Cap:* ${market_cap_billions:.1f}B\n"
        f"📊 *Confidence:* {prediction.confidence}\n"
        f"\n"
        f"{SEPARATOR}\n"
        f"\n"
    )

    remaining_space = MAX_MESSAGE_LENGTH - len(message)
    if len(prediction.analysis) > remaining_space:
        keep = max(remaining_space - len(TRUNCATION_SUFFIX), 0)
        message += prediction.analysis[:keep] + TRUNCATION_SUFFIX
    else:
        message += prediction.analysis

    message += f"\n\n{SEPARATOR}\n\n{FOOTER}\n"
    return message


def format_startup_message(prediction_time: str, timezone: str, next_run: str) -> str:
    return (
        f"🤖 *Crypto Prediction Bot Started!* 🚀\n"
        f"\n"
        f"✅ Bot is now active and running\n"
        f"📅 Daily predictions will be sent at {prediction_time} {timezone}\n"
        f"📊 Analyzing BTC & ETH with Google Gemini AI + real-time data\n"
        f"\n"
        f"{SEPARATOR}\n"
        f"\n"
        f"🔍 *What I do:*\n"
        f"• Daily BTC & ETH price predictions\n"
        f"• 1-month, 6-month, and 1-year forecasts\n"
        f"• Technical, fundamental and sentiment analysis\n"
        f"\n"
        f"🎯 *Next prediction:* {next_run}\n"
        f"\n"
        f"Stay tuned for daily crypto insights! 📈\n"
    )


def format_error_message(error: str) -> str:
    return (
        f"❌ *Error Occurred*\n"
        f"\n"
        f"There was an issue generating today's predictions:\n"
        f"\n"
        f"`{error}`\n"
        f"\n"
        f"The bot will try again at the next scheduled time.\n"
        f"\n"
        f"🔧 Please check your configuration if this persists.\n"
    )


SHUTDOWN_MESSAGE = "🤖 Bot is shutting down... Will restart soon!"
