"""
Domain layer: value objects, payload transforms and field resolvers.
"""

from .models import Ticker, Token, TokenInfo
from .resolvers import FieldResolvers

__all__ = [
    "FieldResolvers",
    "Ticker",
    "Token",
    "TokenInfo",
]
