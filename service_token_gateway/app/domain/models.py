"""
Value objects returned by the query fields.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class Token:
    """Latest market snapshot for one token."""

    id: str
    name: str
    symbol: str
    price: float
    market_cap: float
    volume_24h: float
    circulating_supply: float
    max_supply: Optional[float] = None
    last_updated: Optional[datetime] = None
    # Only listings carry the 1h change; single quotes leave it unset
    percentage_change_1h: Optional[float] = None


@dataclass(frozen=True)
class TokenInfo:
    """Static token metadata."""

    id: str
    name: str
    symbol: str
    category: Optional[str] = None
    description: Optional[str] = None
    slug: Optional[str] = None
    logo: Optional[str] = None
    subreddit: Optional[str] = None
    notice: Optional[str] = None
    tags: Optional[Tuple[str, ...]] = None
    platform: Optional[str] = None
    date_added: Optional[datetime] = None
    twitter_username: Optional[str] = None
    is_hidden: Optional[int] = None


@dataclass(frozen=True)
class Ticker:
    """One historical ticker point. ``timestamp`` is passed through as sent."""

    timestamp: str
    price: float
    volume_24h: float
    market_cap: float
