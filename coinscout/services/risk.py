from __future__ import annotations

from decimal import Decimal
from typing import Optional, Union

from ..types.market import RiskTier

Number = Union[Decimal, int, float, str]

# (tier, liquidity ratio floor, volatility ceiling), most severe first
RISK_THRESHOLDS = (
    (RiskTier.VERY_HIGH, Decimal("0.05"), Decimal("50")),
    (RiskTier.HIGH, Decimal("0.10"), Decimal("30")),
    (RiskTier.MEDIUM, Decimal("0.15"), Decimal("20")),
)


def to_decimal(value: Optional[Number]) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def liquidity_ratio(volume: Number, market_cap: Number) -> Optional[Decimal]:
    cap = to_decimal(market_cap)
    if cap <= 0:
        return None
    return to_decimal(volume) / cap


def classify(volume: Number, market_cap: Number, price_change_24h_pct: Number) -> RiskTier:
    """Classify a coin by liquidity (volume / market cap) and 24h volatility.

    A non-positive market cap has no measurable liquidity and is VERY_HIGH.
    Exact threshold values fall into the lower tier.
    """
    ratio = liquidity_ratio(volume, market_cap)
    if ratio is None:
        return RiskTier.VERY_HIGH

    volatility = abs(to_decimal(price_change_24h_pct))
    for tier, min_ratio, max_volatility in RISK_THRESHOLDS:
        if ratio < min_ratio or volatility > max_volatility:
            return tier
    return RiskTier.LOW
