"""
Tests for the ActionDispatcher.

Covers:
- Registry contents and tool definitions
- Parameter validation at the action boundary
- Category analysis with upstream failures
- Balance-checked investing and swap parameters
- Trending keyword formatting
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from coinscout.core.agent.actions import ActionDispatcher
from coinscout.providers.apify import TrendDataError
from coinscout.providers.coingecko import CoingeckoProvider
from coinscout.providers.wallet.base import WalletError
from coinscout.types.market import CoinCategory, CoinMetrics, MarketDataResult, RiskTier, TrendKeyword


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def market_data():
    provider = MagicMock()
    provider.fetch = AsyncMock(return_value=MarketDataResult(category="meme-token", coins=[
        CoinMetrics(
            symbol="DOGE",
            price=Decimal("0.12"),
            price_change_24h_pct=Decimal("3.5"),
            volume=Decimal("900"),
            market_cap=Decimal("18000"),
            liquidity_score=Decimal("5"),
            risk_level=RiskTier.HIGH,
        ),
    ]))
    return provider


@pytest.fixture
def wallet():
    provider = MagicMock()
    provider.network_id = "base-sepolia"
    provider.get_balance = AsyncMock(return_value=Decimal("10"))
    provider.swap = AsyncMock(return_value="0xfeed")
    return provider


@pytest.fixture
def trend_data():
    provider = MagicMock()
    provider.fetch_keywords = AsyncMock(return_value=[])
    return provider


@pytest.fixture
def dispatcher(market_data, wallet, trend_data):
    return ActionDispatcher(market_data=market_data, wallet=wallet, trend_data=trend_data)


# =============================================================================
# Registry Tests
# =============================================================================

class TestRegistry:

    def test_registers_fixed_actions(self, dispatcher):
        assert set(dispatcher.names) == {
            "analyze_meme",
            "analyze_defi",
            "analyze_ai",
            "analyze_zk",
            "invest_in_coin",
            "fetch_keyword",
            "get_wallet_details",
        }

    def test_invest_definition_marks_required_fields(self, dispatcher):
        definition = next(d for d in dispatcher.tool_definitions() if d.name == "invest_in_coin")
        schema = definition.to_anthropic_format()["input_schema"]

        assert set(schema["required"]) == {"tokenAddress", "amount", "category"}
        assert schema["properties"]["slippage"]["default"] == 2.0
        assert schema["properties"]["category"]["enum"] == ["MEME", "DEFI", "AI", "ZK"]

    @pytest.mark.asyncio
    async def test_unknown_action_is_an_error_response(self, dispatcher):
        response = await dispatcher.invoke("launch_rocket", {})

        assert response.error
        assert "unknown action" in response.payload


# =============================================================================
# Analysis Tests
# =============================================================================

class TestAnalyze:

    @pytest.mark.asyncio
    async def test_default_limit(self, dispatcher, market_data):
        response = await dispatcher.invoke("analyze_meme")

        market_data.fetch.assert_awaited_once_with("meme-token", 10)
        assert not response.error
        assert response.payload["category"] == "MEME"
        assert response.payload["message"] == "Top 1 MEME coins analyzed"
        assert "timestamp" in response.payload

    @pytest.mark.asyncio
    async def test_payload_is_json_friendly(self, dispatcher):
        response = await dispatcher.invoke("analyze_meme", {"limit": 1})

        coin = response.payload["data"][0]
        assert coin == {
            "symbol": "DOGE",
            "price": 0.12,
            "priceChange24h": 3.5,
            "volume": 900.0,
            "marketCap": 18000.0,
            "liquidityScore": 5.0,
            "riskLevel": "HIGH",
        }
        assert '"riskLevel": "HIGH"' in response.as_text()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("category", list(CoinCategory))
    async def test_each_category_queries_its_id(self, dispatcher, market_data, category):
        await dispatcher.invoke(category.action_name, {"limit": 3})

        market_data.fetch.assert_awaited_once_with(category.value, 3)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [{"limit": 0}, {"limit": "lots"}, {"limit": 1000}])
    async def test_invalid_limit_is_rejected_before_fetch(self, dispatcher, market_data, params):
        response = await dispatcher.invoke("analyze_defi", params)

        assert response.error
        assert response.payload.startswith("Error: invalid parameters for analyze_defi")
        assert "limit" in response.payload
        market_data.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_object_parameters_are_rejected(self, dispatcher):
        response = await dispatcher.invoke("analyze_ai", ["limit", 3])

        assert response.error
        assert "expected an object" in response.payload

    @pytest.mark.asyncio
    async def test_rate_limited_upstream_returns_error_string(self, settings, wallet, trend_data):
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(429, json={}))
        )
        dispatcher = ActionDispatcher(
            market_data=CoingeckoProvider(settings, client=client),
            wallet=wallet,
            trend_data=trend_data,
        )

        response = await dispatcher.invoke("analyze_meme", {"limit": 5})

        assert response.error
        assert isinstance(response.payload, str)
        assert "rate limit" in response.payload


# =============================================================================
# Investment Tests
# =============================================================================

class TestInvest:

    @pytest.mark.asyncio
    async def test_insufficient_balance_reports_shortfall(self, dispatcher, wallet):
        wallet.get_balance.return_value = Decimal("3")

        response = await dispatcher.invoke("invest_in_coin", {
            "tokenAddress": "0xabc",
            "amount": 5,
            "category": "MEME",
        })

        assert "3" in response.payload
        assert "5" in response.payload
        assert "Insufficient balance" in response.payload
        wallet.swap.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_swap_uses_default_slippage(self, dispatcher, wallet):
        response = await dispatcher.invoke("invest_in_coin", {
            "tokenAddress": "0xabc",
            "amount": 1,
            "category": "MEME",
        })

        wallet.swap.assert_awaited_once()
        args, kwargs = wallet.swap.await_args
        assert args == ("0xabc", Decimal("1"), Decimal("2"))
        assert kwargs["idempotency_key"]
        assert "TX Hash: 0xfeed" in response.payload
        assert not response.error

    @pytest.mark.asyncio
    async def test_explicit_slippage_and_null_slippage(self, dispatcher, wallet):
        await dispatcher.invoke("invest_in_coin", {
            "tokenAddress": "0xabc", "amount": 1, "slippage": 0.5, "category": "defi",
        })
        await dispatcher.invoke("invest_in_coin", {
            "tokenAddress": "0xabc", "amount": 1, "slippage": None, "category": "AI",
        })

        first, second = wallet.swap.await_args_list
        assert first.args[2] == Decimal("0.5")
        assert second.args[2] == Decimal("2")

    @pytest.mark.asyncio
    async def test_each_invocation_gets_its_own_idempotency_key(self, dispatcher, wallet):
        params = {"tokenAddress": "0xabc", "amount": 1, "category": "ZK"}
        await dispatcher.invoke("invest_in_coin", params)
        await dispatcher.invoke("invest_in_coin", params)

        keys = {call.kwargs["idempotency_key"] for call in wallet.swap.await_args_list}
        assert len(keys) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params,field", [
        ({"amount": 1, "category": "MEME"}, "tokenAddress"),
        ({"tokenAddress": "0xabc", "amount": -1, "category": "MEME"}, "amount"),
        ({"tokenAddress": "0xabc", "amount": 1, "category": "NFT"}, "category"),
        ({"tokenAddress": "0xabc", "amount": 1, "slippage": 150, "category": "MEME"}, "slippage"),
    ])
    async def test_malformed_input_is_rejected(self, dispatcher, wallet, params, field):
        response = await dispatcher.invoke("invest_in_coin", params)

        assert response.error
        assert field in response.payload
        wallet.get_balance.assert_not_awaited()
        wallet.swap.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_wallet_failure_is_reported(self, dispatcher, wallet):
        wallet.get_balance.side_effect = WalletError("node unavailable")

        response = await dispatcher.invoke("invest_in_coin", {
            "tokenAddress": "0xabc", "amount": 1, "category": "MEME",
        })

        assert response.error
        assert response.payload == "Investment failed: node unavailable"


# =============================================================================
# Keyword and Wallet Tests
# =============================================================================

class TestFetchKeyword:

    @pytest.mark.asyncio
    async def test_formats_blocks(self, dispatcher, trend_data):
        trend_data.fetch_keywords.return_value = [
            TrendKeyword(trend="#catcoin", time="2h", time_period="rising", volume="12K"),
            TrendKeyword(trend="#frog"),
        ]

        response = await dispatcher.invoke("fetch_keyword", {"platform": "twitter"})

        assert response.payload == (
            "Keyword: #catcoin\nTrending since: 2h\nTweets: 12K\nStatus: rising"
            "\n\n"
            "Keyword: #frog\nTrending since: N/A\nTweets: N/A\nStatus: N/A"
        )

    @pytest.mark.asyncio
    async def test_failure_returns_error_string(self, dispatcher, trend_data):
        trend_data.fetch_keywords.side_effect = TrendDataError("trend data API returned 500")

        response = await dispatcher.invoke("fetch_keyword", {"platform": "twitter"})

        assert response.error
        assert response.payload == "Failed to fetch keywords: trend data API returned 500"

    @pytest.mark.asyncio
    async def test_platform_is_required(self, dispatcher, trend_data):
        response = await dispatcher.invoke("fetch_keyword", {})

        assert response.error
        assert "platform" in response.payload
        trend_data.fetch_keywords.assert_not_awaited()


class TestWalletDetails:

    @pytest.mark.asyncio
    async def test_reports_network_and_balance(self, dispatcher):
        response = await dispatcher.invoke("get_wallet_details")

        assert response.payload == {"network_id": "base-sepolia", "balance_eth": "10"}

    @pytest.mark.asyncio
    async def test_unexpected_handler_error_does_not_escape(self, dispatcher, wallet):
        wallet.get_balance.side_effect = RuntimeError("boom")

        response = await dispatcher.invoke("get_wallet_details")

        assert response.error
        assert "boom" in response.payload
