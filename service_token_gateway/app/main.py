"""
Token Gateway service: GraphQL over cached upstream market data.
"""

from typing import Any, Dict, Optional

import httpx

from shared.base_service import BaseService
from service_token_gateway.app.adapters import ListingsClient, TickerClient
from service_token_gateway.app.caching import CacheStore
from service_token_gateway.app.domain.resolvers import FieldResolvers
from service_token_gateway.app.graphql_api import create_graphql_router


class TokenGatewayService(BaseService):
    """Token Gateway service implementation."""

    def __init__(
        self,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **config_overrides: Any,
    ):
        super().__init__("token_gateway", 4000, **config_overrides)

        # One cache for every field, built here and injected
        self.cache = CacheStore(
            capacity=self.config.cache_max_entries,
            ttl_seconds=self.config.cache_ttl_seconds,
        )
        self.listings_client = ListingsClient(
            self.config.cmc_api_url,
            self.config.cmc_api_key,
            metrics=self.metrics,
            transport=transport,
        )
        self.ticker_client = TickerClient(
            self.config.cp_api_url,
            metrics=self.metrics,
            transport=transport,
        )
        self.resolvers = FieldResolvers(
            self.cache,
            self.listings_client,
            self.ticker_client,
            metrics=self.metrics,
        )

        self.app.include_router(
            create_graphql_router(self.resolvers, graphiql=self.config.env == "local"),
            prefix="/graphql",
        )
        self._setup_gateway_routes()

        self.logger.info(
            "Token gateway configured",
            cache_max_entries=self.cache.capacity,
            cache_ttl_seconds=self.cache.ttl_seconds,
            listings_url=self.listings_client.base_url,
            tickers_url=self.ticker_client.base_url,
        )

        # Expose service instance via app state for introspection/testing
        self.app.state.gateway_service = self

    def _setup_gateway_routes(self):
        """Set up gateway-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": self.service_name,
                "message": "Token Gateway - GraphQL API at /graphql",
                "version": "1.0.0",
            }

        @self.app.get("/cache/stats")
        async def cache_stats():
            """Get cache statistics."""
            return self.cache.stats()

        @self.app.delete("/cache")
        async def clear_cache():
            """Drop every cached entry."""
            return {"cleared": self.cache.clear()}

    async def _check_dependencies(self) -> Dict[str, str]:
        """Report local dependency state; upstream providers are not probed."""
        return {
            "cache": "ok",
            "listings_api_key": "configured" if self.config.cmc_api_key else "missing",
        }


def create_app(**config_overrides: Any):
    """Create FastAPI application."""
    service = TokenGatewayService(**config_overrides)
    return service.app


if __name__ == "__main__":
    service = TokenGatewayService()
    service.run()
