from .actions import ActionRequest, ActionResponse, AgentChunk
from .market import CoinCategory, CoinMetrics, MarketDataResult, RiskTier, TrendKeyword

__all__ = [
    "ActionRequest",
    "ActionResponse",
    "AgentChunk",
    "CoinCategory",
    "CoinMetrics",
    "MarketDataResult",
    "RiskTier",
    "TrendKeyword",
]
