"""
GraphQL schema for the token query API.

The object types only declare the public shape; field values are read
straight off the domain value objects returned by ``FieldResolvers``, which
the router injects per request under ``info.context["resolvers"]``.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, NewType, Optional

import strawberry
from strawberry.schema.config import StrawberryConfig
from strawberry.types import Info

from service_token_gateway.app.domain.resolvers import (
    DEFAULT_TICKERS_LIMIT,
    DEFAULT_TOKENS_LIMIT,
    FieldResolvers,
)

from .scalars import parse_timestamp, parse_timestamp_literal, serialize_timestamp


Date = NewType("Date", datetime)

DateScalar = strawberry.scalar(
    name="Date",
    description="Date custom scalar type",
    serialize=serialize_timestamp,
    parse_value=parse_timestamp,
    parse_literal=parse_timestamp_literal,
)


@strawberry.type(name="Token")
class TokenType:
    id: strawberry.ID
    name: str
    symbol: str
    price: float
    market_cap: float
    volume_24h: float
    # Nullable: the single-token lookup does not report it
    percentage_change_1h: Optional[float]
    circulating_supply: float
    max_supply: Optional[float]
    last_updated: Optional[Date]


@strawberry.type(name="TokenInfo")
class TokenInfoType:
    id: strawberry.ID
    name: str
    symbol: str
    category: Optional[str]
    description: Optional[str]
    slug: Optional[str]
    logo: Optional[str]
    subreddit: Optional[str]
    notice: Optional[str]
    tags: Optional[List[str]]
    platform: Optional[str]
    date_added: Optional[Date]
    twitter_username: Optional[str]
    is_hidden: Optional[int]


@strawberry.type(name="Ticker")
class TickerType:
    timestamp: str
    price: float
    volume_24h: float
    market_cap: float


def _resolvers(info: Info) -> FieldResolvers:
    return info.context["resolvers"]


@strawberry.type
class Query:
    @strawberry.field(description="Latest token listings.")
    async def tokens(self, info: Info, limit: Optional[int] = DEFAULT_TOKENS_LIMIT) -> Optional[List[TokenType]]:
        return list(await _resolvers(info).tokens(limit))

    @strawberry.field(description="Latest quote for a single token.")
    async def token(self, info: Info, id: strawberry.ID) -> Optional[TokenType]:
        return await _resolvers(info).token(str(id))

    @strawberry.field(description="Metadata for a comma separated list of token ids.")
    async def token_info(self, info: Info, ids: str) -> Optional[List[TokenInfoType]]:
        return list(await _resolvers(info).token_info(ids))

    @strawberry.field(description="Historical ticker points for a token and date window.")
    async def get_crypto_tickers(
        self,
        info: Info,
        crypto_id: str,
        start_date: str,
        end_date: Optional[str] = None,
        limit: Optional[int] = DEFAULT_TICKERS_LIMIT,
    ) -> Optional[List[TickerType]]:
        return list(await _resolvers(info).get_crypto_tickers(crypto_id, start_date, end_date, limit))


schema = strawberry.Schema(
    query=Query,
    config=StrawberryConfig(scalar_map={Date: DateScalar}),
)
