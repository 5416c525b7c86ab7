from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class CoinCategory(str, Enum):
    """Coin categories the agent can analyze, valued by their Coingecko category id."""
    MEME = "meme-token"
    DEFI = "decentralized-finance-defi"
    AI = "artificial-intelligence"
    ZK = "zero-knowledge-zk"

    @property
    def action_name(self) -> str:
        return f"analyze_{self.name.lower()}"


class RiskTier(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {
    RiskTier.LOW: 0,
    RiskTier.MEDIUM: 1,
    RiskTier.HIGH: 2,
    RiskTier.VERY_HIGH: 3,
}


class CoinMetrics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    symbol: str = Field(description="Upper-cased ticker symbol")
    price: Decimal = Field(description="Current price in USD")
    price_change_24h_pct: Decimal = Field(alias="priceChange24h", description="24h price change in percent")
    volume: Decimal = Field(description="24h trading volume in USD")
    market_cap: Decimal = Field(alias="marketCap", description="Market capitalization in USD")
    liquidity_score: Optional[Decimal] = Field(
        default=None,
        alias="liquidityScore",
        description="Volume over market cap, in percent; None when market cap is zero",
    )
    risk_level: RiskTier = Field(alias="riskLevel", description="Risk tier from liquidity and volatility")

    @field_serializer("price", "price_change_24h_pct", "volume", "market_cap", "liquidity_score")
    def _decimal_to_float(self, value: Optional[Decimal]) -> Optional[float]:
        return float(value) if value is not None else None

    @property
    def liquidity_ratio(self) -> Optional[Decimal]:
        if self.market_cap <= 0:
            return None
        return self.volume / self.market_cap


class MarketDataResult(BaseModel):
    category: str
    coins: List[CoinMetrics] = Field(default_factory=list)
    error: Optional[str] = Field(default=None, description="Descriptive error when the fetch failed")
    status_code: Optional[int] = Field(default=None, description="Upstream HTTP status when available")

    @property
    def ok(self) -> bool:
        return self.error is None


class TrendKeyword(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    trend: Optional[str] = None
    time: Optional[str] = None
    time_period: Optional[str] = Field(default=None, alias="timePeriod")
    volume: Optional[str] = None

    def format_block(self) -> str:
        return (
            f"Keyword: {self.trend or 'N/A'}\n"
            f"Trending since: {self.time or 'N/A'}\n"
            f"Tweets: {self.volume or 'N/A'}\n"
            f"Status: {self.time_period or 'N/A'}"
        )


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
