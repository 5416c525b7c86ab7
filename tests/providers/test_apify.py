import httpx
import pytest

from coinscout.providers.apify import ApifyKeywordsProvider, TrendDataError


def make_provider(settings, handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ApifyKeywordsProvider(settings, client=client)


@pytest.mark.asyncio
async def test_fetch_keywords_passes_token(settings):
    seen = {}

    def handler(request):
        seen["url"] = request.url
        return httpx.Response(200, json=[
            {"trend": "#catcoin", "time": "2h", "timePeriod": "rising", "volume": "12K"},
            {"trend": "#frog"},
        ])

    keywords = await make_provider(settings, handler).fetch_keywords()

    assert seen["url"].path == "/v2/datasets/0VEWlmNYYkmymxOC3/items"
    assert seen["url"].params["token"] == "apify-test"
    assert [k.trend for k in keywords] == ["#catcoin", "#frog"]
    assert keywords[0].time_period == "rising"
    assert keywords[1].volume is None


@pytest.mark.asyncio
async def test_format_block_fills_missing_fields(settings):
    keywords = await make_provider(
        settings, lambda request: httpx.Response(200, json=[{"trend": "#frog", "volume": 900}])
    ).fetch_keywords()

    assert keywords[0].format_block() == (
        "Keyword: #frog\n"
        "Trending since: N/A\n"
        "Tweets: 900\n"
        "Status: N/A"
    )


@pytest.mark.asyncio
async def test_http_error_raises_trend_data_error(settings):
    provider = make_provider(settings, lambda request: httpx.Response(403, json={}))

    with pytest.raises(TrendDataError, match="403"):
        await provider.fetch_keywords()


@pytest.mark.asyncio
async def test_missing_key_raises_without_request(settings):
    settings.apify_keywords_api_key = ""

    def handler(request):
        raise AssertionError("no request expected")

    with pytest.raises(TrendDataError, match="not configured"):
        await make_provider(settings, handler).fetch_keywords()
