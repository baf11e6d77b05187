"""
Unit tests for the upstream provider clients.
"""

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_token_gateway.app.adapters import ListingsClient, TickerClient, UpstreamClient
from shared.errors import UpstreamError
from shared.test_helpers import (
    RecordingTransport,
    UpstreamPayloadFactory,
    json_response,
    make_metrics,
    route_by_path,
)


class TestUpstreamClient:
    """Test cases for the generic fetch."""

    @pytest.mark.asyncio
    async def test_fetch_returns_decoded_json(self):
        transport = RecordingTransport(lambda request: json_response({"ok": True}))
        client = UpstreamClient("https://api.example.com/", transport=transport)

        result = await client.fetch("/v1/thing", {"a": 1})

        assert result == {"ok": True}
        assert str(transport.requests[0].url) == "https://api.example.com/v1/thing?a=1"

    @pytest.mark.asyncio
    async def test_fetch_drops_none_params(self):
        transport = RecordingTransport(lambda request: json_response([]))
        client = UpstreamClient("https://api.example.com", transport=transport)

        await client.fetch("v1/thing", {"start": "2024-01-01", "end": None})

        params = transport.requests[0].url.params
        assert params["start"] == "2024-01-01"
        assert "end" not in params

    @pytest.mark.asyncio
    async def test_call_headers_merge_with_defaults(self):
        transport = RecordingTransport(lambda request: json_response({}))
        client = UpstreamClient(
            "https://api.example.com",
            default_headers={"X-Default": "1"},
            transport=transport,
        )

        await client.fetch("v1/thing", headers={"X-Extra": "2"})

        headers = transport.requests[0].headers
        assert headers["X-Default"] == "1"
        assert headers["X-Extra"] == "2"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [400, 401, 429, 500, 503])
    async def test_non_success_status_raises_upstream_error(self, status_code):
        transport = RecordingTransport(lambda request: json_response({"error": "nope"}, status_code=status_code))
        client = UpstreamClient("https://api.example.com", transport=transport)

        with pytest.raises(UpstreamError) as exc_info:
            await client.fetch("v1/thing")

        assert exc_info.value.status == status_code
        assert exc_info.value.code == "UPSTREAM_ERROR"

    @pytest.mark.asyncio
    async def test_network_failure_raises_upstream_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = UpstreamClient("https://api.example.com", transport=httpx.MockTransport(handler))

        with pytest.raises(UpstreamError) as exc_info:
            await client.fetch("v1/thing")

        assert exc_info.value.status is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_invalid_url_raises_upstream_error(self):
        metrics = make_metrics()
        transport = RecordingTransport(lambda request: json_response({}))
        client = UpstreamClient("https://api.example.com", metrics=metrics, transport=transport)

        with pytest.raises(UpstreamError) as exc_info:
            await client.fetch("/v1/tickers/btc\x01/historical")

        assert exc_info.value.status is None
        assert isinstance(exc_info.value.__cause__, httpx.InvalidURL)
        assert transport.requests == []
        assert metrics.get_counter_value("upstream_requests_total", provider="upstream", outcome="error") == 1

    @pytest.mark.asyncio
    async def test_malformed_body_raises_upstream_error(self):
        transport = RecordingTransport(lambda request: httpx.Response(200, content=b"<html>oops</html>"))
        client = UpstreamClient("https://api.example.com", transport=transport)

        with pytest.raises(UpstreamError) as exc_info:
            await client.fetch("v1/thing")

        assert "malformed" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_single_attempt_on_failure(self):
        transport = RecordingTransport(lambda request: json_response({}, status_code=502))
        client = UpstreamClient("https://api.example.com", transport=transport)

        with pytest.raises(UpstreamError):
            await client.fetch("v1/thing")

        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_records_upstream_metrics(self):
        metrics = make_metrics()
        transport = RecordingTransport(route_by_path({"/ok": {}, "/bad": json_response({}, status_code=500)}))
        client = UpstreamClient("https://api.example.com", metrics=metrics, transport=transport)

        await client.fetch("/ok")
        with pytest.raises(UpstreamError):
            await client.fetch("/bad")

        assert metrics.get_counter_value("upstream_requests_total", provider="upstream", outcome="success") == 1
        assert metrics.get_counter_value("upstream_requests_total", provider="upstream", outcome="500") == 1

    @pytest.mark.asyncio
    async def test_fetch_with_patched_async_client(self):
        """The client opens one httpx.AsyncClient per request."""
        with patch('httpx.AsyncClient') as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                return_value=httpx.Response(
                    status_code=200,
                    content=json.dumps({"data": []}),
                    request=httpx.Request("GET", "https://api.example.com/v1/thing"),
                )
            )

            client = UpstreamClient("https://api.example.com")
            result = await client.fetch("v1/thing", {"limit": 3})

            assert result == {"data": []}
            mock_client.return_value.__aenter__.return_value.get.assert_awaited_once_with(
                "https://api.example.com/v1/thing",
                params={"limit": 3},
                headers={},
            )


class TestListingsClient:
    """Test cases for the listings/quotes provider binding."""

    @pytest.fixture
    def transport(self):
        return RecordingTransport(route_by_path({
            "/listings/latest": UpstreamPayloadFactory.listings(),
            "/quotes/latest": UpstreamPayloadFactory.quotes(1),
            "/info": UpstreamPayloadFactory.info(),
        }))

    @pytest.fixture
    def client(self, transport):
        return ListingsClient("https://pro-api.coinmarketcap.com", "secret-key", transport=transport)

    @pytest.mark.asyncio
    async def test_listings_request_shape(self, client, transport):
        await client.get_listings(5)

        request = transport.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/v1/cryptocurrency/listings/latest"
        assert request.url.params["limit"] == "5"
        assert request.headers["X-CMC_PRO_API_KEY"] == "secret-key"

    @pytest.mark.asyncio
    async def test_quotes_request_shape(self, client, transport):
        await client.get_quotes("1")

        request = transport.requests[0]
        assert request.url.path == "/v1/cryptocurrency/quotes/latest"
        assert request.url.params["id"] == "1"
        assert request.headers["X-CMC_PRO_API_KEY"] == "secret-key"

    @pytest.mark.asyncio
    async def test_info_passes_ids_as_id(self, client, transport):
        await client.get_info("1,1027")

        request = transport.requests[0]
        assert request.url.path == "/v1/cryptocurrency/info"
        assert request.url.params["id"] == "1,1027"


class TestTickerClient:
    """Test cases for the historical ticker provider binding."""

    @pytest.mark.asyncio
    async def test_historical_request_shape(self):
        transport = RecordingTransport(lambda request: json_response(UpstreamPayloadFactory.historical()))
        client = TickerClient("https://api.coinpaprika.com", transport=transport)

        await client.get_historical("btc-bitcoin", "2024-01-01", "2024-02-01", 12)

        request = transport.requests[0]
        assert request.url.path == "/v1/tickers/btc-bitcoin/historical"
        assert dict(request.url.params) == {
            "start": "2024-01-01",
            "end": "2024-02-01",
            "interval": "7d",
            "limit": "12",
        }
        assert "X-CMC_PRO_API_KEY" not in request.headers

    @pytest.mark.asyncio
    async def test_historical_omits_missing_end(self):
        transport = RecordingTransport(lambda request: json_response([]))
        client = TickerClient("https://api.coinpaprika.com", transport=transport)

        await client.get_historical("btc-bitcoin", "2024-01-01")

        params = transport.requests[0].url.params
        assert "end" not in params
        assert params["limit"] == "30"
