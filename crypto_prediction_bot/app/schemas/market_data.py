"""Market data schemas"""
from pydantic import BaseModel, Field


class CryptoData(BaseModel):
    """Market snapshot for a single asset"""
    symbol: str = Field(..., description="Asset symbol, e.g. BTC")
    price: float = Field(default=0.0, ge=0, description="Current price in USD")
    change_24h: float = Field(default=0.0, description="24h price change in percent")
    volume_24h: float = Field(default=0.0, ge=0, description="24h trading volume in USD")
    market_cap: float = Field(default=0.0, ge=0, description="Market capitalisation in USD")
    high_24h: float = Field(default=0.0, ge=0, description="24h high in USD")
    low_24h: float = Field(default=0.0, ge=0, description="24h low in USD")


class MarketSentiment(BaseModel):
    """Global market snapshot used as sentiment context"""
    # No upstream source for fear & greed yet, neutral value
    fear_greed_index: int = Field(default=50, ge=0, le=100)
    btc_dominance: float = Field(default=0.0, ge=0, description="BTC market cap share in percent")
    eth_dominance: float = Field(default=0.0, ge=0, description="ETH market cap share in percent")
    total_market_cap: float = Field(default=0.0, ge=0, description="Total crypto market cap in USD")
