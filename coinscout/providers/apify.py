import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import Settings
from ..types.market import TrendKeyword
from .base import TrendDataProvider


class TrendDataError(Exception):
    """Raised when the trending keywords dataset cannot be read."""


class ApifyKeywordsProvider(TrendDataProvider):
    """Reads trending Twitter keywords from an Apify dataset"""

    name = "apify"

    def __init__(
        self,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.api_key = settings.apify_keywords_api_key
        self.dataset_id = settings.apify_dataset_id
        self.base_url = settings.apify_base_url.rstrip("/")
        self.timeout_s = settings.request_timeout_seconds
        self._client = client
        self.logger = logger or logging.getLogger(__name__)

    @property
    def items_url(self) -> str:
        return f"{self.base_url}/datasets/{self.dataset_id}/items"

    async def ready(self) -> bool:
        return bool(self.api_key)

    async def _get(self) -> httpx.Response:
        params = {"token": self.api_key}
        if self._client is not None:
            return await self._client.get(self.items_url, params=params, timeout=self.timeout_s)
        async with httpx.AsyncClient() as client:
            return await client.get(self.items_url, params=params, timeout=self.timeout_s)

    async def fetch_keywords(self) -> List[TrendKeyword]:
        """Fetch keyword records, raising TrendDataError on any failure."""
        if not await self.ready():
            raise TrendDataError("trend data API key not configured")

        try:
            response = await self._get()
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            self.logger.error("Keyword fetch failed: status=%s", exc.response.status_code)
            raise TrendDataError(f"trend data API returned {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            self.logger.error("Keyword fetch failed: %s", exc)
            raise TrendDataError(str(exc) or exc.__class__.__name__) from exc

        if not isinstance(payload, list):
            raise TrendDataError("unexpected response shape from trend data API")

        keywords: List[TrendKeyword] = []
        for item in payload:
            if not isinstance(item, dict):
                continue
            keywords.append(TrendKeyword.model_validate({
                key: str(value) for key, value in item.items()
                if key in ("trend", "time", "timePeriod", "volume") and value is not None
            }))
        return keywords
