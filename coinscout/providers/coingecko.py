import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..services.risk import classify, liquidity_ratio, to_decimal
from ..types.market import CoinMetrics, MarketDataResult
from .base import MarketDataProvider


STATUS_MESSAGES = {
    400: "Error: Invalid request parameters. Please try different search criteria.",
    401: "Error: Invalid CoinGecko API key. Please check your configuration.",
    429: "Error: API rate limit exceeded. Please try again later.",
}
GENERIC_ERROR = "Error: Failed to fetch market data. Please try again later."


class MarketDataError(Exception):
    """Raised inside the provider when a fetch cannot produce coin data."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CoingeckoProvider(MarketDataProvider):
    """Coingecko API provider for category market data"""

    name = "coingecko"

    def __init__(
        self,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.api_key = settings.coingecko_api_key
        self.base_url = settings.coingecko_base_url.rstrip("/")
        self.timeout_s = settings.request_timeout_seconds
        self._client = client
        self.logger = logger or logging.getLogger(__name__)

    def _build_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {"accept": "application/json"}
        if self.api_key:
            headers["x-cg-demo-api-key"] = self.api_key
        return headers

    async def ready(self) -> bool:
        return True  # API key is optional for basic tier

    async def _get(self, path: str, params: Dict[str, Any]) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(
                f"{self.base_url}{path}",
                headers=self._build_headers(),
                params=params,
                timeout=self.timeout_s,
            )
        async with httpx.AsyncClient() as client:
            return await client.get(
                f"{self.base_url}{path}",
                headers=self._build_headers(),
                params=params,
                timeout=self.timeout_s,
            )

    async def fetch(self, category: str, limit: int = 10) -> MarketDataResult:
        """Fetch a single page of coins for a category, never raising past this call."""
        params = {
            "vs_currency": "usd",
            "category": category,
            "order": "volume_desc",
            "per_page": limit,
            "sparkline": "false",
        }

        try:
            response = await self._get("/coins/markets", params=params)
            if response.status_code >= 400:
                raise MarketDataError(
                    STATUS_MESSAGES.get(response.status_code, GENERIC_ERROR),
                    status_code=response.status_code,
                )
            payload = response.json()
            if not isinstance(payload, list):
                raise MarketDataError(GENERIC_ERROR, status_code=response.status_code)
        except MarketDataError as exc:
            self.logger.error(
                "Failed to fetch %s data: status=%s", category, exc.status_code
            )
            return MarketDataResult(category=category, error=str(exc), status_code=exc.status_code)
        except (httpx.HTTPError, ValueError) as exc:
            self.logger.error("Failed to fetch %s data: %s", category, exc)
            return MarketDataResult(category=category, error=GENERIC_ERROR)

        coins = self._normalize(payload[:limit], category)
        return MarketDataResult(category=category, coins=coins, status_code=response.status_code)

    def _normalize(self, records: List[Any], category: str) -> List[CoinMetrics]:
        coins: List[CoinMetrics] = []
        for record in records:
            try:
                coins.append(self._to_metrics(record))
            except (ValidationError, ArithmeticError, TypeError, ValueError, KeyError, AttributeError) as exc:
                self.logger.warning("Skipping malformed %s record: %s", category, exc)
        return coins

    @staticmethod
    def _to_metrics(record: Dict[str, Any]) -> CoinMetrics:
        volume = to_decimal(record.get("total_volume"))
        market_cap = to_decimal(record.get("market_cap"))
        price_change = to_decimal(record.get("price_change_percentage_24h"))
        ratio = liquidity_ratio(volume, market_cap)

        symbol = record["symbol"]
        if not symbol:
            raise ValueError("record has no symbol")

        return CoinMetrics(
            symbol=str(symbol).upper(),
            price=to_decimal(record.get("current_price")),
            price_change_24h_pct=price_change,
            volume=volume,
            market_cap=market_cap,
            liquidity_score=ratio * 100 if ratio is not None else None,
            risk_level=classify(volume, market_cap, price_change),
        )
