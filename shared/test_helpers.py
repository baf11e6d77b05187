"""
Test helper functions and factory methods for the Token Gateway.
"""

import json
from typing import Any, Callable, Dict, List, Optional

import httpx

from shared.metrics import MetricsCollector


class UpstreamPayloadFactory:
    """Factory for provider payloads shaped like the real APIs."""

    @staticmethod
    def listing_entry(
        token_id: int = 1,
        name: str = "Bitcoin",
        symbol: str = "BTC",
        price: float = 64250.12,
        percent_change_1h: Optional[float] = 0.42,
        max_supply: Optional[float] = 21000000,
        last_updated: str = "2024-03-01T12:00:00.000Z",
    ) -> Dict[str, Any]:
        """Create one listings/quotes entry."""
        return {
            "id": token_id,
            "name": name,
            "symbol": symbol,
            "slug": name.lower(),
            "circulating_supply": 19650000,
            "total_supply": 19650000,
            "max_supply": max_supply,
            "last_updated": last_updated,
            "quote": {
                "USD": {
                    "price": price,
                    "volume_24h": 31250000000.5,
                    "percent_change_1h": percent_change_1h,
                    "percent_change_24h": 1.8,
                    "market_cap": 1262500000000.0,
                    "last_updated": last_updated,
                }
            },
        }

    @classmethod
    def listings(cls, count: int = 2) -> Dict[str, Any]:
        """Create a listings/latest response."""
        catalogue = [
            (1, "Bitcoin", "BTC", 64250.12),
            (1027, "Ethereum", "ETH", 3410.55),
            (825, "Tether USDt", "USDT", 1.0),
        ]
        entries = [
            cls.listing_entry(token_id=token_id, name=name, symbol=symbol, price=price)
            for token_id, name, symbol, price in catalogue[:count]
        ]
        return {"status": {"error_code": 0}, "data": entries}

    @classmethod
    def quotes(cls, token_id: int = 1) -> Dict[str, Any]:
        """Create a quotes/latest response keyed by id."""
        return {"status": {"error_code": 0}, "data": {str(token_id): cls.listing_entry(token_id=token_id)}}

    @staticmethod
    def info(ids: List[int] = None) -> Dict[str, Any]:
        """Create an info response keyed by id."""
        ids = ids or [1, 1027]
        records = {
            1: {
                "id": 1,
                "name": "Bitcoin",
                "symbol": "BTC",
                "category": "coin",
                "description": "Bitcoin (BTC) is a cryptocurrency.",
                "slug": "bitcoin",
                "logo": "https://s2.coinmarketcap.com/static/img/coins/64x64/1.png",
                "subreddit": "bitcoin",
                "notice": "",
                "tags": ["mineable", "pow", "sha-256"],
                "platform": None,
                "date_added": "2010-07-13T00:00:00.000Z",
                "twitter_username": "",
                "is_hidden": 0,
            },
            1027: {
                "id": 1027,
                "name": "Ethereum",
                "symbol": "ETH",
                "category": "coin",
                "description": "Ethereum (ETH) is a smart contract platform.",
                "slug": "ethereum",
                "logo": "https://s2.coinmarketcap.com/static/img/coins/64x64/1027.png",
                "subreddit": "ethereum",
                "notice": None,
                "tags": ["pos", "smart-contracts"],
                "platform": None,
                "date_added": "2015-08-07T00:00:00.000Z",
                "twitter_username": "ethereum",
                "is_hidden": 0,
            },
            3408: {
                "id": 3408,
                "name": "USDC",
                "symbol": "USDC",
                "category": "token",
                "slug": "usd-coin",
                "tags": ["stablecoin"],
                "platform": {"id": 1027, "name": "Ethereum", "symbol": "ETH", "token_address": "0xa0b8"},
                "date_added": "2018-10-08T00:00:00.000Z",
                "twitter_username": "circle",
                "is_hidden": 0,
            },
        }
        return {"status": {"error_code": 0}, "data": {str(i): records[i] for i in ids}}

    @staticmethod
    def historical(points: int = 3) -> List[Dict[str, Any]]:
        """Create a historical tickers response (a bare list)."""
        return [
            {
                "timestamp": f"2024-01-{day:02d}T00:00:00Z",
                "price": 42000.0 + day * 100,
                "volume_24h": 21000000000.0 + day,
                "market_cap": 820000000000.0 + day,
            }
            for day in range(1, points + 1)
        ]


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    def requests_to(self, path_suffix: str) -> List[httpx.Request]:
        return [request for request in self.requests if request.url.path.endswith(path_suffix)]


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    """Build a JSON httpx response."""
    return httpx.Response(status_code=status_code, content=json.dumps(payload), headers={"Content-Type": "application/json"})


def route_by_path(routes: Dict[str, Any]) -> Callable[[httpx.Request], httpx.Response]:
    """Handler answering by URL path suffix; values are payloads or callables."""

    def handler(request: httpx.Request) -> httpx.Response:
        for suffix, payload in routes.items():
            if request.url.path.endswith(suffix):
                result = payload(request) if callable(payload) else payload
                return result if isinstance(result, httpx.Response) else json_response(result)
        return json_response({"error": "not found"}, status_code=404)

    return handler


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_metrics() -> MetricsCollector:
    """Isolated metrics collector for assertions."""
    return MetricsCollector("token_gateway_test")
