"""Daily BTC/ETH price predictions from Gemini, delivered to Telegram"""

__version__ = "1.0.0"
