"""
Adapters package for the Token Gateway.

HTTP client wrappers for the upstream data providers. These adapters
encapsulate base URLs, request shapes, credentials and the mapping of
transport failures onto ``shared.errors.UpstreamError``.

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .upstream_client import ListingsClient, TickerClient, UpstreamClient

__all__ = [
    "UpstreamClient",
    "ListingsClient",
    "TickerClient",
]
