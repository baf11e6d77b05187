"""
Read-through resolution for the public query fields.

Each field follows the same path: build a deterministic cache key, return
the cached value on a hit, otherwise fetch from the provider, transform the
payload and store the result. Failures are logged with the field and its
arguments and re-raised as ``FieldResolutionError``; nothing is written to
the cache on any failure path.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, Optional, Tuple, TypeVar, Union
from urllib.parse import quote

from shared.logging import get_logger
from shared.errors import EmptyResultError, FieldResolutionError, TokenGatewayException, TransformError

from service_token_gateway.app.adapters.upstream_client import ListingsClient, TickerClient
from service_token_gateway.app.caching.cache_store import CacheStore

from . import transforms
from .models import Ticker, Token, TokenInfo

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


CachedValue = Union[Token, Tuple[Token, ...], Tuple[TokenInfo, ...], Tuple[Ticker, ...]]
T = TypeVar("T", bound=CachedValue)

DEFAULT_TOKENS_LIMIT = 10
DEFAULT_TICKERS_LIMIT = 30

NO_DATA_MESSAGE = "No data available for the specified parameters"
INTERNAL_ERROR = "INTERNAL_ERROR"


def tokens_key(limit: int) -> str:
    return f"tokens:{limit}"


def token_key(token_id: str) -> str:
    return f"token:{token_id}"


def token_info_key(ids: str) -> str:
    return f"tokenInfo:{ids}"


def _key_segment(value: Optional[str]) -> str:
    # Absent renders empty; ":" and "%" are escaped so segments cannot run together
    if value is None:
        return ""
    return quote(value, safe="")


def tickers_key(crypto_id: str, start_date: str, end_date: Optional[str], limit: int) -> str:
    return (
        f"tickers:{_key_segment(crypto_id)}:{_key_segment(start_date)}"
        f":{_key_segment(end_date)}:{limit}"
    )


class FieldResolvers:
    """Resolves query fields against the shared cache and the upstream providers."""

    def __init__(
        self,
        cache: CacheStore[CachedValue],
        listings_client: ListingsClient,
        ticker_client: TickerClient,
        *,
        metrics: Optional["MetricsCollector"] = None,
    ):
        self.cache = cache
        self.listings_client = listings_client
        self.ticker_client = ticker_client
        self.metrics = metrics
        self.logger = get_logger("token_gateway.resolvers")

    async def tokens(self, limit: Optional[int] = DEFAULT_TOKENS_LIMIT) -> Tuple[Token, ...]:
        """Latest listings, ``limit`` entries (``None`` means the default)."""
        if limit is None:
            limit = DEFAULT_TOKENS_LIMIT
        return await self._resolve(
            field="tokens",
            key=tokens_key(limit),
            arguments={"limit": limit},
            fetch=lambda: self.listings_client.get_listings(limit),
            transform=transforms.tokens_from_listings,
            failure_message="Failed to fetch tokens",
        )

    async def token(self, token_id: str) -> Token:
        """Latest quote for one token (no 1h change)."""
        return await self._resolve(
            field="token",
            key=token_key(token_id),
            arguments={"id": token_id},
            fetch=lambda: self.listings_client.get_quotes(token_id),
            transform=lambda payload: transforms.token_from_quotes(payload, token_id),
            failure_message=f"Failed to fetch token {token_id}",
        )

    async def token_info(self, ids: str) -> Tuple[TokenInfo, ...]:
        """Metadata for a comma separated list of ids."""
        return await self._resolve(
            field="tokenInfo",
            key=token_info_key(ids),
            arguments={"ids": ids},
            fetch=lambda: self.listings_client.get_info(ids),
            transform=transforms.token_info_from_payload,
            failure_message=f"Failed to fetch token info for ids {ids}",
        )

    async def get_crypto_tickers(
        self,
        crypto_id: str,
        start_date: str,
        end_date: Optional[str] = None,
        limit: Optional[int] = DEFAULT_TICKERS_LIMIT,
    ) -> Tuple[Ticker, ...]:
        """Historical ticker points for a date window.

        An empty ``end_date`` is treated as absent, and a ``None`` limit as the default.
        """
        end_date = end_date or None
        if limit is None:
            limit = DEFAULT_TICKERS_LIMIT
        return await self._resolve(
            field="getCryptoTickers",
            key=tickers_key(crypto_id, start_date, end_date, limit),
            arguments={
                "cryptoId": crypto_id,
                "startDate": start_date,
                "endDate": end_date,
                "limit": limit,
            },
            fetch=lambda: self.ticker_client.get_historical(crypto_id, start_date, end_date, limit),
            transform=transforms.tickers_from_historical,
            failure_message="Failed to fetch cryptocurrency ticker data",
        )

    async def _resolve(
        self,
        *,
        field: str,
        key: str,
        arguments: Dict[str, Any],
        fetch: Callable[[], Awaitable[Any]],
        transform: Callable[[Any], T],
        failure_message: str,
    ) -> T:
        cached = self.cache.get(key)
        self._record_lookup(field, hit=cached is not None)
        if cached is not None:
            self.logger.debug("Cache hit", field=field, key=key)
            return cached  # type: ignore[return-value]

        self.logger.debug("Cache miss", field=field, key=key)
        try:
            payload = await fetch()
            result = self._transform(field, transform, payload)
        except TokenGatewayException as exc:
            message = NO_DATA_MESSAGE if isinstance(exc, EmptyResultError) else failure_message
            self.logger.error(
                "Field resolution failed",
                field=field,
                arguments=arguments,
                code=exc.code,
                error=exc.message,
            )
            if self.metrics:
                self.metrics.record_error(exc.code)
            raise FieldResolutionError(field, message, exc.code, arguments) from exc
        except Exception as exc:
            self.logger.exception(
                "Field resolution failed unexpectedly",
                field=field,
                arguments=arguments,
                error=str(exc),
            )
            if self.metrics:
                self.metrics.record_error(INTERNAL_ERROR)
            raise FieldResolutionError(field, failure_message, INTERNAL_ERROR, arguments) from exc

        self.cache.set(key, result)
        return result

    @staticmethod
    def _transform(field: str, transform: Callable[[Any], T], payload: Any) -> T:
        try:
            return transform(payload)
        except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as exc:
            raise TransformError(field, f"{type(exc).__name__}: {exc}") from exc

    def _record_lookup(self, field: str, hit: bool) -> None:
        if self.metrics:
            self.metrics.record_cache_lookup(field, hit)
