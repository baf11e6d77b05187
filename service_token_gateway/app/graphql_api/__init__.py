"""
GraphQL surface of the gateway: schema, Date scalar codec and FastAPI router.
"""

from .router import create_graphql_router
from .schema import schema

__all__ = ["create_graphql_router", "schema"]
