"""
Pure mappings from upstream payloads to domain value objects.

Any missing key or wrongly typed value surfaces as KeyError, TypeError,
ValueError or AttributeError; the resolvers translate those into
``TransformError``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from shared.errors import EmptyResultError

from .models import Ticker, Token, TokenInfo


def parse_upstream_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse ISO-8601 strings with Z or offset suffixes into aware UTC datetimes."""
    if value is None:
        return None

    candidate = value.strip()
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"

    parsed = datetime.fromisoformat(candidate)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def _token_from_entry(entry: Dict[str, Any], *, include_hourly_change: bool) -> Token:
    usd = entry["quote"]["USD"]
    return Token(
        id=str(entry["id"]),
        name=entry["name"],
        symbol=entry["symbol"],
        price=float(usd["price"]),
        market_cap=float(usd["market_cap"]),
        volume_24h=float(usd["volume_24h"]),
        percentage_change_1h=_optional_float(usd.get("percent_change_1h")) if include_hourly_change else None,
        circulating_supply=float(entry["circulating_supply"]),
        max_supply=_optional_float(entry.get("max_supply")),
        last_updated=parse_upstream_timestamp(entry.get("last_updated")),
    )


def tokens_from_listings(payload: Dict[str, Any]) -> Tuple[Token, ...]:
    """Map a listings response (``data`` is a list) to tokens, in order."""
    return tuple(
        _token_from_entry(entry, include_hourly_change=True)
        for entry in payload["data"]
    )


def token_from_quotes(payload: Dict[str, Any], token_id: str) -> Token:
    """Map a quotes response (``data`` keyed by id) to a single token."""
    return _token_from_entry(payload["data"][str(token_id)], include_hourly_change=False)


def token_info_from_payload(payload: Dict[str, Any]) -> Tuple[TokenInfo, ...]:
    """Map an info response (``data`` keyed by id) to metadata records in upstream order."""
    records = []
    for entry in payload["data"].values():
        platform = entry.get("platform")
        tags = entry.get("tags")
        records.append(
            TokenInfo(
                id=str(entry["id"]),
                name=entry["name"],
                symbol=entry["symbol"],
                category=entry.get("category"),
                description=entry.get("description"),
                slug=entry.get("slug"),
                logo=entry.get("logo"),
                subreddit=entry.get("subreddit"),
                notice=entry.get("notice"),
                tags=tuple(tags) if tags is not None else None,
                platform=platform["name"] if platform else None,
                date_added=parse_upstream_timestamp(entry.get("date_added")),
                twitter_username=entry.get("twitter_username"),
                is_hidden=int(entry["is_hidden"]) if entry.get("is_hidden") is not None else None,
            )
        )
    return tuple(records)


def tickers_from_historical(payload: Any) -> Tuple[Ticker, ...]:
    """Map historical points; an empty or absent payload is an EmptyResultError."""
    if not payload:
        raise EmptyResultError()

    return tuple(
        Ticker(
            timestamp=point["timestamp"],
            price=float(point["price"]),
            volume_24h=float(point["volume_24h"]),
            market_cap=float(point["market_cap"]),
        )
        for point in payload
    )
