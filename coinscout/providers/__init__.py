from .apify import ApifyKeywordsProvider, TrendDataError
from .coingecko import CoingeckoProvider, MarketDataError

__all__ = [
    "ApifyKeywordsProvider",
    "CoingeckoProvider",
    "MarketDataError",
    "TrendDataError",
]
