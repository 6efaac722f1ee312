"""Assets the bot tracks"""
from typing import Dict, NamedTuple

from .exceptions import MarketDataError


class AssetInfo(NamedTuple):
    coin_id: str
    name: str
    emoji: str


SUPPORTED_ASSETS: Dict[str, AssetInfo] = {
    "BTC": AssetInfo("bitcoin", "BITCOIN (BTC)", "🟠"),
    "ETH": AssetInfo("ethereum", "ETHEREUM (ETH)", "🔵"),
}


def get_asset_info(symbol: str) -> AssetInfo:
    """Look up a supported asset by symbol

    Raises:
        MarketDataError: If the symbol is not supported
    """
    try:
        return SUPPORTED_ASSETS[symbol.upper()]
    except KeyError:
        raise MarketDataError(
            f"Unsupported asset {symbol!r}; supported: {', '.join(SUPPORTED_ASSETS)}")
