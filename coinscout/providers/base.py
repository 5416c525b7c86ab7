from abc import ABC, abstractmethod
from typing import List

from ..types.market import MarketDataResult, TrendKeyword


class Provider(ABC):
    """Base provider interface"""

    name: str
    timeout_s: int = 10

    @abstractmethod
    async def ready(self) -> bool:
        """Check if provider is ready to serve requests"""
        pass


class MarketDataProvider(Provider):
    """Provider for category market data"""

    @abstractmethod
    async def fetch(self, category: str, limit: int = 10) -> MarketDataResult:
        """Get up to ``limit`` coins in ``category`` ordered by descending volume"""
        pass


class TrendDataProvider(Provider):
    """Provider for trending keywords"""

    @abstractmethod
    async def fetch_keywords(self) -> List[TrendKeyword]:
        """Get the current trending keywords"""
        pass
