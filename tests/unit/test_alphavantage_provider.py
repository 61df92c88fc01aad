"""
Unit tests for the Alpha Vantage price provider.

Tests cover:
- GLOBAL_QUOTE parsing and request parameters (HTTP mocked with httpx.MockTransport)
- Quote caching
- Rate-limit notes, HTTP and transport failures
- History and FX delegation to a companion provider
- Provider selection in the API wiring, with Yahoo fallback
"""

from datetime import date, datetime, timezone

import httpx
import pytest

from stock_portfolios.api import deps
from stock_portfolios.config.settings import Settings, set_settings, reset_settings
from stock_portfolios.core.exceptions import DependencyUnavailableError, PriceNotFoundError
from stock_portfolios.domain.models import PriceBasis
from stock_portfolios.providers import (
    AlphaVantageProvider,
    StubMarketDataProvider,
    YahooMarketDataProvider,
    history_capability,
)


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _quote_payload(price: str = "187.4400", day: str = "2024-06-14") -> dict:
    return {
        "Global Quote": {
            "01. symbol": "AAPL",
            "05. price": price,
            "07. latest trading day": day,
        }
    }


# =============================================================================
# LATEST PRICE
# =============================================================================


class TestAlphaVantageLatestPrice:
    """Tests for AlphaVantageProvider.get_latest_price."""

    def test_global_quote(self):
        """
        GIVEN Alpha Vantage answers a GLOBAL_QUOTE
        WHEN I ask for the latest AAPL price
        THEN price and trading day are parsed and the key is sent
        """
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=_quote_payload())

        provider = AlphaVantageProvider("demo-key", client=_client(handler))
        quote = provider.get_latest_price(" aapl ")

        assert quote.symbol == "AAPL"
        assert quote.price == 187.44
        assert quote.as_of == datetime(2024, 6, 14, tzinfo=timezone.utc)
        params = requests[0].url.params
        assert params["function"] == "GLOBAL_QUOTE"
        assert params["symbol"] == "AAPL"
        assert params["apikey"] == "demo-key"

    def test_quotes_are_cached(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=_quote_payload())

        provider = AlphaVantageProvider("demo-key", client=_client(handler))
        provider.get_latest_price("AAPL")
        provider.get_latest_price("aapl")

        assert len(calls) == 1

    @pytest.mark.parametrize(
        "payload",
        [
            {"Global Quote": {}},
            {},
            _quote_payload(price="0.0000"),
            _quote_payload(price="n/a"),
        ],
    )
    def test_missing_price(self, payload):
        provider = AlphaVantageProvider(
            "demo-key", client=_client(lambda request: httpx.Response(200, json=payload))
        )

        with pytest.raises(PriceNotFoundError):
            provider.get_latest_price("NOPE")

    @pytest.mark.parametrize("key", ["Note", "Information"])
    def test_rate_limit_note(self, key):
        payload = {key: "Thank you for using Alpha Vantage! Our standard API rate limit is ..."}
        provider = AlphaVantageProvider(
            "demo-key", client=_client(lambda request: httpx.Response(200, json=payload))
        )

        with pytest.raises(DependencyUnavailableError):
            provider.get_latest_price("AAPL")

    def test_http_error_status(self):
        provider = AlphaVantageProvider(
            "demo-key", client=_client(lambda request: httpx.Response(503, text="busy"))
        )

        with pytest.raises(DependencyUnavailableError, match="http 503"):
            provider.get_latest_price("AAPL")

    def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("offline", request=request)

        provider = AlphaVantageProvider("demo-key", client=_client(handler))

        with pytest.raises(DependencyUnavailableError):
            provider.get_latest_price("AAPL")

    def test_api_key_required(self):
        with pytest.raises(DependencyUnavailableError):
            AlphaVantageProvider("   ")


# =============================================================================
# COMPANION DELEGATION
# =============================================================================


class TestAlphaVantageCompanion:
    """History and FX come from the companion provider."""

    def test_history_and_rates_delegate(self):
        provider = AlphaVantageProvider(
            "demo-key",
            companion=StubMarketDataProvider(),
            client=_client(lambda request: httpx.Response(200, json=_quote_payload())),
        )

        assert history_capability(provider) is provider
        point = provider.get_price_on_or_before("AAPL", date(2024, 1, 2), PriceBasis.OPEN)
        assert point.price == 184.25
        assert provider.get_rate("USD", "TWD").rate == 32.0

    def test_without_companion(self):
        provider = AlphaVantageProvider(
            "demo-key", client=_client(lambda request: httpx.Response(200, json=_quote_payload()))
        )

        assert history_capability(provider) is None
        with pytest.raises(DependencyUnavailableError):
            provider.get_rate("USD", "TWD")


# =============================================================================
# PROVIDER SELECTION
# =============================================================================


class TestProviderSelection:
    """Tests for deps.get_market_provider."""

    @pytest.fixture(autouse=True)
    def _fresh_provider(self):
        deps.get_market_provider.cache_clear()
        yield
        deps.get_market_provider.cache_clear()
        reset_settings()

    @pytest.mark.parametrize("kind", ["alphavantage", "alpha", "AV"])
    def test_alphavantage_with_key(self, kind):
        set_settings(Settings(price_provider=kind, alphavantage_api_key="demo-key"))

        provider = deps.get_market_provider()

        assert isinstance(provider, AlphaVantageProvider)
        assert provider.supports_history

    def test_alphavantage_without_key_falls_back_to_yahoo(self):
        set_settings(Settings(price_provider="alphavantage", alphavantage_api_key=""))

        assert isinstance(deps.get_market_provider(), YahooMarketDataProvider)

    def test_stub(self):
        set_settings(Settings(price_provider="stub"))

        assert isinstance(deps.get_market_provider(), StubMarketDataProvider)
