"""
HTTP clients for the upstream market data providers.
"""

import time
from typing import TYPE_CHECKING, Any, Dict, Optional

import httpx

from shared.logging import get_logger
from shared.errors import UpstreamError

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


class UpstreamClient:
    """
    Single-attempt JSON fetcher for one provider.

    Every non-success outcome (connection failure, non-2xx status, body that
    is not JSON) is raised as ``UpstreamError``. There are no retries and no
    timeout beyond the httpx default.
    """

    provider = "upstream"

    def __init__(
        self,
        base_url: str,
        *,
        default_headers: Optional[Dict[str, str]] = None,
        metrics: Optional["MetricsCollector"] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.default_headers = dict(default_headers or {})
        self.metrics = metrics
        self.logger = get_logger(f"token_gateway.{self.provider}_client")
        self._transport = transport

    async def fetch(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """GET ``endpoint`` and return the decoded JSON body."""
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        query = {key: value for key, value in (params or {}).items() if value is not None}
        request_headers = {**self.default_headers, **(headers or {})}

        start = time.perf_counter()
        outcome = "error"
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(url, params=query, headers=request_headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            self.logger.error("Upstream request failed", url=url, params=query, error=str(exc))
            raise UpstreamError(
                service=self.provider,
                message=f"request failed: {exc}",
                details={"url": url, "params": query},
            ) from exc
        else:
            if not response.is_success:
                outcome = str(response.status_code)
                self.logger.error(
                    "Upstream returned error status",
                    url=url,
                    params=query,
                    status_code=response.status_code,
                    response=response.text[:500],
                )
                raise UpstreamError(
                    service=self.provider,
                    message=f"unexpected status {response.status_code}",
                    status=response.status_code,
                    details={"url": url, "params": query},
                )

            try:
                payload = response.json()
            except ValueError as exc:
                outcome = "malformed"
                self.logger.error("Upstream returned malformed body", url=url, params=query)
                raise UpstreamError(
                    service=self.provider,
                    message="malformed response body",
                    status=response.status_code,
                    details={"url": url, "params": query},
                ) from exc

            outcome = "success"
            self.logger.debug("Upstream payload retrieved", url=url, params=query)
            return payload
        finally:
            if self.metrics:
                self.metrics.record_upstream_request(self.provider, outcome, time.perf_counter() - start)


class ListingsClient(UpstreamClient):
    """Token listings, quotes and metadata (CoinMarketCap API)."""

    provider = "listings"
    API_KEY_HEADER = "X-CMC_PRO_API_KEY"

    def __init__(self, base_url: str, api_key: str, **kwargs: Any):
        super().__init__(base_url, default_headers={self.API_KEY_HEADER: api_key}, **kwargs)

    async def get_listings(self, limit: int) -> Any:
        """Latest listings, most capitalised first."""
        return await self.fetch("/v1/cryptocurrency/listings/latest", {"limit": limit})

    async def get_quotes(self, token_id: str) -> Any:
        """Latest quote for one token id."""
        return await self.fetch("/v1/cryptocurrency/quotes/latest", {"id": token_id})

    async def get_info(self, ids: str) -> Any:
        """Static metadata for a comma separated list of ids."""
        return await self.fetch("/v1/cryptocurrency/info", {"id": ids})


class TickerClient(UpstreamClient):
    """Historical ticker points (CoinPaprika API). No credentials required."""

    provider = "tickers"
    INTERVAL = "7d"

    async def get_historical(
        self,
        crypto_id: str,
        start: str,
        end: Optional[str] = None,
        limit: int = 30,
    ) -> Any:
        return await self.fetch(
            f"/v1/tickers/{crypto_id}/historical",
            {
                "start": start,
                "end": end,
                "interval": self.INTERVAL,
                "limit": limit,
            },
        )
