"""
GraphQL router integration with FastAPI.
"""

from typing import Any, Dict

from fastapi import Request
from strawberry.fastapi import GraphQLRouter

from shared.logging import get_logger, set_user_context
from service_token_gateway.app.domain.resolvers import FieldResolvers

from .schema import schema


CALLER_HEADER = "X-User-Id"

logger = get_logger("token_gateway.graphql")


def create_graphql_router(resolvers: FieldResolvers, *, graphiql: bool = False) -> GraphQLRouter:
    """Create the GraphQL router bound to one set of field resolvers."""

    async def get_context(request: Request) -> Dict[str, Any]:
        # Opaque caller identity; passed through for logging only
        user = request.headers.get(CALLER_HEADER)
        set_user_context(user)
        logger.debug("GraphQL context created", user_id=user)
        return {"resolvers": resolvers, "user": user}

    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if graphiql else None,
    )
